from typing import Any, Optional

IMAGE_MIME_TYPE = "image/jpeg"

SYSTEM_PROMPT = (
    "## your job & context\n"
    "you are a python data scientist. you are given tasks to complete and you run "
    "python code to solve them.\n"
    "- the python code runs in jupyter notebook.\n"
    "- every time you call `execute_python` tool, the python code is executed in a "
    "separate cell. it's okay to multiple calls to `execute_python`.\n"
    "- display visualizations using matplotlib or any other visualization library "
    "directly in the notebook. don't worry about saving the visualizations to a file.\n"
    "- you have access to the internet and can make api requests.\n"
    "- you also have access to the filesystem and can read/write files.\n"
    "- you can install any pip package (if it exists) if you need to but the usual "
    "packages for data analysis are already preinstalled.\n"
    "- you can run any python code you want, everything is running in a secure "
    "sandbox environment.\n"
    "\n"
    "## style guide\n"
    'tool response values that have text inside "[]"  mean that a visual element got '
    "rendered in the notebook. for example:\n"
    '- "[chart]" means that a chart was generated in the notebook.\n'
)


def image_data_url(base64_image: str) -> str:
    return f"data:{IMAGE_MIME_TYPE};base64,{base64_image}"


def build_messages(user_message: str, base64_image: Optional[str] = None) -> list[dict[str, Any]]:
    messages: list[dict[str, Any]] = [{"role": "system", "content": SYSTEM_PROMPT}]
    if base64_image:
        messages.append(
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": user_message},
                    {"type": "image_url", "image_url": {"url": image_data_url(base64_image)}},
                ],
            }
        )
    else:
        messages.append({"role": "user", "content": user_message})
    return messages
