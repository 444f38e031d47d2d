import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from e2b_code_interpreter import AsyncSandbox

from code_interpreter.config import Settings

logger = logging.getLogger(__name__)


class SandboxExecutionError(RuntimeError):
    def __init__(self, value: str, name: Optional[str] = None, traceback: Optional[str] = None) -> None:
        super().__init__(value)
        self.value = value
        self.name = name
        self.traceback = traceback


@asynccontextmanager
async def open_sandbox(settings: Settings) -> AsyncIterator[AsyncSandbox]:
    """Create one remote notebook session and kill it on every exit path."""
    sandbox = await AsyncSandbox.create(
        timeout=settings.sandbox_timeout,
        api_key=settings.e2b_api_key,
    )
    logger.info("Sandbox session opened")
    try:
        yield sandbox
    finally:
        await sandbox.kill()
        logger.info("Sandbox session closed")


class SandboxBridge:
    def __init__(self, sandbox: Any) -> None:
        self.sandbox = sandbox

    def _on_stdout(self, message: Any) -> None:
        logger.info("[Code Interpreter stdout] %s", message)

    def _on_stderr(self, message: Any) -> None:
        logger.info("[Code Interpreter stderr] %s", message)

    async def execute(self, code: str) -> list[Any]:
        logger.info("Running code interpreter...")
        execution = await self.sandbox.run_code(
            code,
            on_stdout=self._on_stdout,
            on_stderr=self._on_stderr,
        )

        error = execution.error
        if error:
            logger.error("[Code Interpreter ERROR] %s", error)
            raise SandboxExecutionError(
                error.value,
                name=getattr(error, "name", None),
                traceback=getattr(error, "traceback", None),
            )
        return execution.results
