import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

DEFAULT_MODEL = "gpt-4o"
DEFAULT_SANDBOX_TIMEOUT = 300
DEFAULT_IMAGE_OUTPUT_PATH = "image.png"

_TRUTHY = {"1", "true", "yes", "on"}


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    openai_api_key: str
    e2b_api_key: str
    openai_model: str = DEFAULT_MODEL
    sandbox_timeout: int = DEFAULT_SANDBOX_TIMEOUT
    image_output_path: str = DEFAULT_IMAGE_OUTPUT_PATH
    input_image_path: Optional[str] = None
    parse_tool_arguments_json: bool = False
    log_level: str = "INFO"


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Read settings from the process environment.

    Values from a ``.env`` file (by default the nearest one above the
    working directory) are loaded first but never override
    variables that are already set.
    """
    load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True), override=False)

    missing = [key for key in ("OPENAI_API_KEY", "E2B_API_KEY") if not os.getenv(key)]
    if missing:
        raise ConfigurationError(f"Set {', '.join(missing)} before running.")

    timeout = os.getenv("SANDBOX_TIMEOUT", str(DEFAULT_SANDBOX_TIMEOUT))
    try:
        sandbox_timeout = int(timeout)
    except ValueError as exc:
        raise ConfigurationError(f"SANDBOX_TIMEOUT must be an integer, got {timeout!r}.") from exc

    return Settings(
        openai_api_key=os.environ["OPENAI_API_KEY"],
        e2b_api_key=os.environ["E2B_API_KEY"],
        openai_model=os.getenv("OPENAI_MODEL", DEFAULT_MODEL),
        sandbox_timeout=sandbox_timeout,
        image_output_path=os.getenv("IMAGE_OUTPUT_PATH", DEFAULT_IMAGE_OUTPUT_PATH),
        input_image_path=os.getenv("INPUT_IMAGE_PATH") or None,
        parse_tool_arguments_json=_flag(os.getenv("PARSE_TOOL_ARGUMENTS_JSON")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def _log_level(name: str) -> int:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=_log_level(level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
