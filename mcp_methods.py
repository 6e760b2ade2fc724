"""
The fixed table of MCP methods carried over the HTTP binding.

Both the HTTP receiver and the stdio forwarder iterate over METHODS, so a
method is added or removed in exactly one place.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Type
from pydantic import BaseModel, ConfigDict, ValidationError

from errors import InvalidParamsError, MethodNotFoundError


class MethodParams(BaseModel):
    model_config = ConfigDict(extra="allow")


class InitializeParams(MethodParams):
    pass


class ListParams(MethodParams):
    cursor: Optional[str] = None


class CallToolParams(MethodParams):
    name: str
    arguments: Optional[Dict[str, Any]] = None


class ResourceParams(MethodParams):
    uri: str


class GetPromptParams(MethodParams):
    name: str
    arguments: Optional[Dict[str, str]] = None


@dataclass(frozen=True)
class MethodDescriptor:
    name: str
    params_model: Type[MethodParams]
    invoke: Callable[[Any, MethodParams], Awaitable[Any]]

    def parse_params(self, params: Any) -> MethodParams:
        """Validate raw JSON-RPC params against this method's parameter model"""
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise InvalidParamsError(self.name, "params must be an object")
        try:
            return self.params_model.model_validate(params)
        except ValidationError as e:
            raise InvalidParamsError(self.name, _summarize(e)) from e


def _summarize(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'params'}: {err['msg']}"
        for err in error.errors()
    )


async def _initialize(router, params: InitializeParams):
    return await router.initialize(params.model_dump())


async def _list_tools(router, params: ListParams):
    return {"tools": await router.list_tools()}


async def _call_tool(router, params: CallToolParams):
    return await router.call_tool(params.name, params.arguments)


async def _list_resources(router, params: ListParams):
    return {"resources": await router.list_resources()}


async def _read_resource(router, params: ResourceParams):
    return {"contents": await router.read_resource(params.uri)}


async def _subscribe(router, params: ResourceParams):
    await router.subscribe_to_resource(params.uri)
    return {}


async def _unsubscribe(router, params: ResourceParams):
    await router.unsubscribe_from_resource(params.uri)
    return {}


async def _list_prompts(router, params: ListParams):
    return {"prompts": await router.list_prompts()}


async def _get_prompt(router, params: GetPromptParams):
    return {"messages": await router.get_prompt(params.name, params.arguments)}


METHODS: Mapping[str, MethodDescriptor] = MappingProxyType({
    descriptor.name: descriptor
    for descriptor in (
        MethodDescriptor("initialize", InitializeParams, _initialize),
        MethodDescriptor("tools/list", ListParams, _list_tools),
        MethodDescriptor("tools/call", CallToolParams, _call_tool),
        MethodDescriptor("resources/list", ListParams, _list_resources),
        MethodDescriptor("resources/read", ResourceParams, _read_resource),
        MethodDescriptor("resources/subscribe", ResourceParams, _subscribe),
        MethodDescriptor("resources/unsubscribe", ResourceParams, _unsubscribe),
        MethodDescriptor("prompts/list", ListParams, _list_prompts),
        MethodDescriptor("prompts/get", GetPromptParams, _get_prompt),
    )
})


async def dispatch(router, method: str, params: Any = None) -> Any:
    """
    Run a JSON-RPC method against a router.

    Raises:
        MethodNotFoundError: If the method is not in METHODS.
        InvalidParamsError: If params do not fit the method's parameter model.
    """
    descriptor = METHODS.get(method)
    if descriptor is None:
        raise MethodNotFoundError(method)
    return await descriptor.invoke(router, descriptor.parse_params(params))
