import asyncio
import logging
from typing import Any, Optional

from openai import AsyncOpenAI

from code_interpreter.config import DEFAULT_MODEL
from code_interpreter.llm.prompts import build_messages
from code_interpreter.llm.tools import EXECUTE_PYTHON, decode_tool_arguments, tools
from code_interpreter.sandbox.executor import SandboxBridge

logger = logging.getLogger(__name__)


class ChatApiError(RuntimeError):
    pass


class ConversationDriver:
    """Runs one prompt through the chat API and executes its tool calls.

    All tool calls of a response are dispatched concurrently against the
    same sandbox bridge, awaited together, and their results returned in
    tool-call order.
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        bridge: SandboxBridge,
        model: str = DEFAULT_MODEL,
        parse_json_arguments: bool = False,
    ) -> None:
        self.client = client
        self.bridge = bridge
        self.model = model
        self.parse_json_arguments = parse_json_arguments

    async def _complete(self, messages: list[dict[str, Any]]) -> Any:
        try:
            return await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                tools=tools,
                tool_choice="auto",
            )
        except Exception as exc:  # noqa: BLE001
            raise ChatApiError(str(exc)) from exc

    async def _dispatch(self, tool_call: Any) -> list[Any]:
        if tool_call.function.name != EXECUTE_PYTHON:
            logger.debug("Ignoring tool call %s", tool_call.function.name)
            return []
        code = decode_tool_arguments(
            tool_call.function.arguments, parse_json=self.parse_json_arguments
        ).code
        logger.info("CODE TO RUN\n%s", code)
        return await self.bridge.execute(code)

    async def _run_tool_calls(self, tool_calls: list[Any]) -> list[Any]:
        outcomes = await asyncio.gather(
            *(self._dispatch(tool_call) for tool_call in tool_calls),
            return_exceptions=True,
        )
        results: list[Any] = []
        for tool_call, outcome in zip(tool_calls, outcomes):
            if isinstance(outcome, Exception):
                logger.error("Tool call %s failed: %s", tool_call.function.name, outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.extend(outcome)
        return results

    async def chat(self, user_message: str, base64_image: Optional[str] = None) -> list[Any]:
        logger.info("\n%s\nUser Message: %s\n%s", "=" * 50, user_message, "=" * 50)
        messages = build_messages(user_message, base64_image)

        try:
            response = await self._complete(messages)
        except ChatApiError as exc:
            logger.error("Error during API call: %s", exc)
            return []

        results: list[Any] = []
        for choice in response.choices:
            tool_calls = choice.message.tool_calls
            if tool_calls:
                results.extend(await self._run_tool_calls(list(tool_calls)))
            else:
                logger.info("Answer: %s", choice.message.content)
        return results
