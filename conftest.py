import pytest

from main import build_router


class StubRouter:
    """Router returning fixed values and recording every call."""

    def __init__(self):
        self.calls = []
        self.error = None
        self.tools = [{
            "name": "calculator",
            "description": "Perform basic calculations.",
            "inputSchema": {"type": "object"}
        }]
        self.resources = [{"uri": "memo://notes", "name": "notes"}]
        self.contents = [{"uri": "memo://notes", "mimeType": "text/plain", "text": "hello"}]
        self.prompts = [{"name": "greet", "arguments": [{"name": "who", "required": True}]}]
        self.messages = [{"role": "user", "content": {"type": "text", "text": "Hello, Ada"}}]

    def _record(self, name, *args):
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error

    async def initialize(self, params):
        self._record("initialize", params)
        return {
            "protocolVersion": "2024-11-05",
            "capabilities": {"tools": {"listChanged": True}},
            "serverInfo": {"name": "stub", "version": "0.1.0"}
        }

    async def list_tools(self):
        self._record("list_tools")
        return self.tools

    async def call_tool(self, name, arguments):
        self._record("call_tool", name, arguments)
        return {"content": [{"type": "text", "text": f"{name} called"}]}

    async def list_resources(self):
        self._record("list_resources")
        return self.resources

    async def read_resource(self, uri):
        self._record("read_resource", uri)
        return self.contents

    async def subscribe_to_resource(self, uri):
        self._record("subscribe_to_resource", uri)

    async def unsubscribe_from_resource(self, uri):
        self._record("unsubscribe_from_resource", uri)

    async def list_prompts(self):
        self._record("list_prompts")
        return self.prompts

    async def get_prompt(self, name, arguments):
        self._record("get_prompt", name, arguments)
        return self.messages


@pytest.fixture
def stub_router():
    return StubRouter()


@pytest.fixture
def example_router():
    return build_router()


# (method, params, expected result given StubRouter)
STUB_CASES = [
    ("initialize",
     {"protocolVersion": "2024-11-05", "capabilities": {}, "clientInfo": {"name": "test-client", "version": "1.0.0"}},
     {"protocolVersion": "2024-11-05", "capabilities": {"tools": {"listChanged": True}},
      "serverInfo": {"name": "stub", "version": "0.1.0"}}),
    ("tools/list", {}, {"tools": StubRouter().tools}),
    ("tools/call", {"name": "calculator", "arguments": {"operation": "add", "a": "1", "b": "2"}},
     {"content": [{"type": "text", "text": "calculator called"}]}),
    ("resources/list", {}, {"resources": StubRouter().resources}),
    ("resources/read", {"uri": "memo://notes"}, {"contents": StubRouter().contents}),
    ("resources/subscribe", {"uri": "memo://notes"}, {}),
    ("resources/unsubscribe", {"uri": "memo://notes"}, {}),
    ("prompts/list", {}, {"prompts": StubRouter().prompts}),
    ("prompts/get", {"name": "greet", "arguments": {"who": "Ada"}}, {"messages": StubRouter().messages}),
]


def pytest_generate_tests(metafunc):
    if "stub_case" in metafunc.fixturenames:
        metafunc.parametrize("stub_case", STUB_CASES, ids=[case[0] for case in STUB_CASES])
