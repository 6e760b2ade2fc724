import json
import inspect
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Set, Tuple, Type
from pydantic import BaseModel

from mcp_types import (
    McpCapabilities, McpInitializeResult, McpTool, McpResource,
    McpPrompt, McpPromptArgument, McpCallToolResult
)

logger = logging.getLogger(__name__)


class Router(Protocol):
    """The operations the HTTP adapter dispatches to. Every operation may raise."""

    async def initialize(self, params: Dict[str, Any]) -> Any: ...

    async def list_tools(self) -> List[Any]: ...

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> Any: ...

    async def list_resources(self) -> List[Any]: ...

    async def read_resource(self, uri: str) -> List[Any]: ...

    async def subscribe_to_resource(self, uri: str) -> None: ...

    async def unsubscribe_from_resource(self, uri: str) -> None: ...

    async def list_prompts(self) -> List[Any]: ...

    async def get_prompt(self, name: str, arguments: Optional[Dict[str, str]]) -> List[Any]: ...


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class McpRouter:
    """In-process registry of tools, resources and prompts implementing Router."""

    def __init__(self, name: str, version: str, capabilities: Optional[Dict[str, Any]] = None):
        self.name = name
        self.version = version
        self.capabilities: Dict[str, Any] = dict(capabilities or {})
        self.tools: Dict[str, McpTool] = {}
        self.tool_handlers: Dict[str, Tuple[Type[BaseModel], Callable]] = {}
        self.resources: Dict[str, McpResource] = {}
        self.resource_handlers: Dict[str, Callable] = {}
        self.prompts: Dict[str, McpPrompt] = {}
        self.prompt_handlers: Dict[str, Callable] = {}
        self.subscriptions: Set[str] = set()

    def add_tool(self, name: str, description: str, schema: Type[BaseModel], handler: Callable):
        """
        Register a tool.

        Args:
            name: Tool name used by tools/call.
            description: Human readable description sent in tools/list.
            schema: Pydantic model for the tool arguments; its JSON schema is advertised as inputSchema.
            handler: Called with the validated arguments model. May be sync or async.
        """
        self.tools[name] = McpTool(
            name=name,
            description=description,
            inputSchema=schema.model_json_schema()
        )
        self.tool_handlers[name] = (schema, handler)

    def add_resource(self, uri: str, name: str, handler: Callable,
                     description: Optional[str] = None, mime_type: Optional[str] = None):
        """Register a resource; handler(uri) returns the list of contents."""
        self.resources[uri] = McpResource(uri=uri, name=name, description=description, mimeType=mime_type)
        self.resource_handlers[uri] = handler

    def add_prompt(self, name: str, description: str, handler: Callable,
                   arguments: Optional[List[McpPromptArgument]] = None):
        """Register a prompt; handler(arguments) returns the list of messages."""
        self.prompts[name] = McpPrompt(name=name, description=description, arguments=arguments or [])
        self.prompt_handlers[name] = handler

    def _server_capabilities(self) -> McpCapabilities:
        capabilities = dict(self.capabilities)
        if self.tools:
            capabilities.setdefault("tools", {"listChanged": True})
        if self.resources:
            capabilities.setdefault("resources", {"subscribe": True, "listChanged": True})
        if self.prompts:
            capabilities.setdefault("prompts", {"listChanged": True})
        return McpCapabilities(**capabilities)

    async def initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        logger.info("Initialize from client %s", params.get("clientInfo", {}))
        result = McpInitializeResult(
            capabilities=self._server_capabilities(),
            serverInfo={"name": self.name, "version": self.version}
        )
        return result.model_dump(exclude_none=True)

    async def list_tools(self) -> List[Dict[str, Any]]:
        return [tool.model_dump() for tool in self.tools.values()]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if name not in self.tool_handlers:
            raise ValueError(f"Tool not found: {name}")

        schema, handler = self.tool_handlers[name]
        args = schema.model_validate(arguments or {})
        logger.debug("Calling tool %s", name)
        result = await _resolve(handler(args))

        # Results already shaped as MCP content pass through untouched
        if isinstance(result, McpCallToolResult):
            return result.model_dump()
        if isinstance(result, dict) and "content" in result:
            return result

        text = json.dumps(result, indent=2) if isinstance(result, (dict, list)) else str(result)
        return McpCallToolResult(content=[{"type": "text", "text": text}]).model_dump()

    async def list_resources(self) -> List[Dict[str, Any]]:
        return [resource.model_dump(exclude_none=True) for resource in self.resources.values()]

    def _require_resource(self, uri: str):
        if uri not in self.resources:
            raise ValueError(f"Resource not found: {uri}")

    async def read_resource(self, uri: str) -> List[Any]:
        self._require_resource(uri)
        return list(await _resolve(self.resource_handlers[uri](uri)))

    async def subscribe_to_resource(self, uri: str) -> None:
        self._require_resource(uri)
        self.subscriptions.add(uri)

    async def unsubscribe_from_resource(self, uri: str) -> None:
        self.subscriptions.discard(uri)

    async def list_prompts(self) -> List[Dict[str, Any]]:
        return [prompt.model_dump(exclude_none=True) for prompt in self.prompts.values()]

    async def get_prompt(self, name: str, arguments: Optional[Dict[str, str]]) -> List[Any]:
        if name not in self.prompts:
            raise ValueError(f"Prompt not found: {name}")

        arguments = arguments or {}
        for argument in self.prompts[name].arguments:
            if argument.required and argument.name not in arguments:
                raise ValueError(f"Missing required argument: {argument.name}")

        return list(await _resolve(self.prompt_handlers[name](arguments)))
