import base64
from contextlib import asynccontextmanager
from types import SimpleNamespace

import pytest

from code_interpreter.config import Settings

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-bytes"
PNG_B64 = base64.b64encode(PNG_BYTES).decode("ascii")


class FakeCompletions:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class FakeSandbox:
    """Stands in for a remote notebook session."""

    def __init__(self, results=None, error=None, stdout=(), stderr=()):
        self.results = [] if results is None else results
        self.error = error
        self.stdout = stdout
        self.stderr = stderr
        self.codes = []

    async def run_code(self, code, on_stdout=None, on_stderr=None):
        self.codes.append(code)
        for line in self.stdout:
            on_stdout(line)
        for line in self.stderr:
            on_stderr(line)
        return SimpleNamespace(error=self.error, results=self.results)


def tool_call(name, arguments):
    return SimpleNamespace(
        id=f"call_{name}",
        type="function",
        function=SimpleNamespace(name=name, arguments=arguments),
    )


def completion(*tool_calls, content=None):
    message = SimpleNamespace(
        role="assistant", content=content, tool_calls=list(tool_calls) or None
    )
    return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


def fake_client(response=None, error=None):
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(response, error)))


class SessionTracker:
    def __init__(self, sandbox):
        self.sandbox = sandbox
        self.opened = 0
        self.closed = 0

    @asynccontextmanager
    async def __call__(self, settings):
        self.opened += 1
        try:
            yield self.sandbox
        finally:
            self.closed += 1


@pytest.fixture
def settings(tmp_path):
    return Settings(
        openai_api_key="sk-test",
        e2b_api_key="e2b-test",
        image_output_path=str(tmp_path / "image.png"),
    )


@pytest.fixture
def fakes():
    return SimpleNamespace(
        FakeSandbox=FakeSandbox,
        SessionTracker=SessionTracker,
        tool_call=tool_call,
        completion=completion,
        client=fake_client,
        png_b64=PNG_B64,
        png_bytes=PNG_BYTES,
    )
