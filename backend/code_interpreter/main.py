import asyncio
import base64
import logging
from pathlib import Path
from typing import Any, Callable, Optional

from openai import AsyncOpenAI

from code_interpreter.config import Settings, configure_logging, load_settings
from code_interpreter.orchestrator import ConversationDriver
from code_interpreter.sandbox.executor import SandboxBridge, open_sandbox

logger = logging.getLogger(__name__)

PROMPT = "Plot a chart visualizing the height distribution of men based on the data you know."


def _load_input_image(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    return base64.b64encode(Path(path).read_bytes()).decode("ascii")


def save_first_image(results: list[Any], output_path: str) -> Optional[Path]:
    result = results[0] if results else None
    logger.info("Result object: %s", result)

    png = getattr(result, "png", None) if result is not None else None
    if not png:
        logger.info("No PNG data available.")
        return None

    path = Path(output_path)
    with open(path, "wb") as handle:
        handle.write(base64.b64decode(png))
    logger.info("Image written to %s", path)
    return path


async def run(
    settings: Settings,
    client: Optional[AsyncOpenAI] = None,
    session_factory: Callable[[Settings], Any] = open_sandbox,
    prompt: str = PROMPT,
) -> Optional[Path]:
    if client is None:
        async with AsyncOpenAI(api_key=settings.openai_api_key) as owned_client:
            return await _run_with_client(settings, owned_client, session_factory, prompt)
    return await _run_with_client(settings, client, session_factory, prompt)


async def _run_with_client(
    settings: Settings,
    client: AsyncOpenAI,
    session_factory: Callable[[Settings], Any],
    prompt: str,
) -> Optional[Path]:
    try:
        base64_image = _load_input_image(settings.input_image_path)
        async with session_factory(settings) as sandbox:
            driver = ConversationDriver(
                client,
                SandboxBridge(sandbox),
                model=settings.openai_model,
                parse_json_arguments=settings.parse_tool_arguments_json,
            )
            results = await driver.chat(prompt, base64_image)
            logger.info("codeInterpreterResults: %s", results)
            return save_first_image(results, settings.image_output_path)
    except Exception as exc:  # noqa: BLE001
        logger.exception("An error occurred: %s", exc)
        return None


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    asyncio.run(run(settings))


if __name__ == "__main__":
    main()
