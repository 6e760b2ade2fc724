"""
Router and dispatch table tests without the HTTP layer.
"""
import pytest
from pydantic import BaseModel, ValidationError

from errors import InvalidParamsError, MethodNotFoundError
from mcp_methods import METHODS, dispatch
from mcp_router import McpRouter
from mcp_types import McpPromptArgument, create_error_response, create_success_response


def test_method_table_is_fixed():
    assert list(METHODS) == [
        "initialize", "tools/list", "tools/call",
        "resources/list", "resources/read", "resources/subscribe", "resources/unsubscribe",
        "prompts/list", "prompts/get",
    ]
    with pytest.raises(TypeError):
        METHODS["ping"] = METHODS["initialize"]


def test_envelope_helpers_keep_required_members():
    assert create_success_response(None, None) == {"jsonrpc": "2.0", "id": None, "result": None}
    assert create_error_response(3, -32700, "Parse error") == {
        "jsonrpc": "2.0", "id": 3, "error": {"code": -32700, "message": "Parse error"}
    }


@pytest.mark.asyncio
async def test_initialize_advertises_registered_capabilities(example_router):
    result = await dispatch(example_router, "initialize", {
        "protocolVersion": "2024-11-05",
        "capabilities": {"tools": {}, "resources": {}, "prompts": {}},
        "clientInfo": {"name": "test-client", "version": "1.0.0"}
    })

    assert result == {
        "protocolVersion": "2024-11-05",
        "capabilities": {"tools": {"listChanged": True}, "logging": {}},
        "serverInfo": {"name": "http-example-server", "version": "1.0.0"}
    }


@pytest.mark.asyncio
async def test_tools_list_has_calculator_schema(example_router):
    result = await dispatch(example_router, "tools/list")

    (tool,) = result["tools"]
    assert tool["name"] == "calculator"
    assert set(tool["inputSchema"]["properties"]) == {"operation", "a", "b"}
    assert tool["inputSchema"]["properties"]["operation"]["enum"] == ["add", "subtract", "multiply", "divide"]


@pytest.mark.asyncio
@pytest.mark.parametrize("operation, a, b, text", [
    ("add", "2", "3", "5"),
    ("subtract", "2", "3", "-1"),
    ("multiply", "1.5", "2", "3"),
    ("divide", "1", "4", "0.25"),
])
async def test_calculator(example_router, operation, a, b, text):
    result = await dispatch(example_router, "tools/call", {
        "name": "calculator",
        "arguments": {"operation": operation, "a": a, "b": b}
    })

    assert result == {"content": [{"type": "text", "text": text}]}


@pytest.mark.asyncio
async def test_calculator_division_by_zero(example_router):
    with pytest.raises(ValueError, match="Division by zero"):
        await dispatch(example_router, "tools/call", {
            "name": "calculator",
            "arguments": {"operation": "divide", "a": "1", "b": "0"}
        })


@pytest.mark.asyncio
async def test_tool_arguments_are_validated(example_router):
    with pytest.raises(ValidationError):
        await dispatch(example_router, "tools/call", {"name": "calculator", "arguments": {"operation": "pow"}})


@pytest.mark.asyncio
async def test_unknown_tool(example_router):
    with pytest.raises(ValueError, match="Tool not found: search"):
        await dispatch(example_router, "tools/call", {"name": "search"})


@pytest.mark.asyncio
async def test_plain_tool_results_are_wrapped_as_text():
    router = McpRouter("direct", "0.1.0")

    async def instances(args):
        return ["default", "4k"]

    class NoArgs(BaseModel):
        pass

    router.add_tool("list_instances", "List instances", NoArgs, instances)
    result = await router.call_tool("list_instances", None)

    assert result == {"content": [{"type": "text", "text": '[\n  "default",\n  "4k"\n]'}], "isError": False}


@pytest.fixture
def library_router():
    router = McpRouter("library", "0.1.0")
    router.add_resource(
        "memo://notes", "notes",
        lambda uri: [{"uri": uri, "mimeType": "text/plain", "text": "remember the milk"}],
        mime_type="text/plain"
    )
    router.add_prompt(
        "greet", "Greet someone",
        lambda args: [{"role": "user", "content": {"type": "text", "text": f"Hello, {args['who']}"}}],
        arguments=[McpPromptArgument(name="who", required=True)]
    )
    return router


@pytest.mark.asyncio
async def test_resources(library_router):
    listing = await dispatch(library_router, "resources/list")
    read = await dispatch(library_router, "resources/read", {"uri": "memo://notes"})
    subscribed = await dispatch(library_router, "resources/subscribe", {"uri": "memo://notes"})

    assert listing == {"resources": [{"uri": "memo://notes", "name": "notes", "mimeType": "text/plain"}]}
    assert read == {"contents": [{"uri": "memo://notes", "mimeType": "text/plain", "text": "remember the milk"}]}
    assert subscribed == {}
    assert library_router.subscriptions == {"memo://notes"}

    assert await dispatch(library_router, "resources/unsubscribe", {"uri": "memo://notes"}) == {}
    assert library_router.subscriptions == set()


@pytest.mark.asyncio
async def test_unknown_resource(library_router):
    with pytest.raises(ValueError, match="Resource not found: memo://missing"):
        await dispatch(library_router, "resources/read", {"uri": "memo://missing"})
    with pytest.raises(ValueError, match="Resource not found"):
        await dispatch(library_router, "resources/subscribe", {"uri": "memo://missing"})


@pytest.mark.asyncio
async def test_prompts(library_router):
    listing = await dispatch(library_router, "prompts/list")
    prompt = await dispatch(library_router, "prompts/get", {"name": "greet", "arguments": {"who": "Ada"}})

    assert listing == {"prompts": [{
        "name": "greet",
        "description": "Greet someone",
        "arguments": [{"name": "who", "required": True}]
    }]}
    assert prompt == {"messages": [{"role": "user", "content": {"type": "text", "text": "Hello, Ada"}}]}


@pytest.mark.asyncio
async def test_prompt_missing_required_argument(library_router):
    with pytest.raises(ValueError, match="Missing required argument: who"):
        await dispatch(library_router, "prompts/get", {"name": "greet"})


@pytest.mark.asyncio
async def test_dispatch_errors(library_router):
    with pytest.raises(MethodNotFoundError, match="Method not found: ping"):
        await dispatch(library_router, "ping")
    with pytest.raises(InvalidParamsError) as exc_info:
        await dispatch(library_router, "resources/read", {"url": "memo://notes"})
    assert "uri" in exc_info.value.detail
