import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

EXECUTE_PYTHON = "execute_python"

tools = [
    {
        "type": "function",
        "function": {
            "name": EXECUTE_PYTHON,
            "description": (
                "Execute python code in a Jupyter notebook cell and returns any result, "
                "stdout, stderr, display_data, and error."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "code": {
                        "type": "string",
                        "description": "The python code to execute in a single cell.",
                    },
                    "unit": {"type": "string", "enum": ["celsius", "fahrenheit"]},
                },
                "required": ["code"],
            },
        },
    }
]


class ArgumentDecodingError(ValueError):
    pass


@dataclass(frozen=True)
class ObjectArguments:
    code: str


@dataclass(frozen=True)
class RawArguments:
    text: str

    @property
    def code(self) -> str:
        # The raw string is sent to the sandbox as source, undecoded.
        return self.text


ToolArguments = Union[ObjectArguments, RawArguments]


def _from_mapping(arguments: Mapping) -> ObjectArguments:
    code = arguments.get("code")
    if not isinstance(code, str):
        raise ArgumentDecodingError(f"Tool arguments carry no string 'code': {arguments!r}")
    return ObjectArguments(code=code)


def decode_tool_arguments(arguments: Any, parse_json: bool = False) -> ToolArguments:
    """Resolve tool-call arguments to an object or raw-string variant.

    A mapping must hold a string ``code``. A string is kept verbatim unless
    ``parse_json`` is set and it decodes to an object with ``code``.
    """
    if isinstance(arguments, Mapping):
        return _from_mapping(arguments)
    if isinstance(arguments, str):
        if parse_json:
            try:
                parsed = json.loads(arguments)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, dict) and isinstance(parsed.get("code"), str):
                return ObjectArguments(code=parsed["code"])
        return RawArguments(text=arguments)
    raise ArgumentDecodingError(
        f"Unsupported tool arguments of type {type(arguments).__name__}."
    )
