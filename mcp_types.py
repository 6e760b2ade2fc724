from typing import Any, Dict, List, Optional, Union, Literal
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr

JSONRPC_VERSION = "2.0"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603

# booleans are not valid ids
RequestId = Union[StrictStr, StrictInt, StrictFloat, None]


class JsonRpcRequest(BaseModel):
    jsonrpc: Literal["2.0"]
    id: RequestId = None
    method: str = Field(min_length=1)
    params: Optional[Any] = None


class JsonRpcError(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None


class JsonRpcSuccessResponse(BaseModel):
    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId = None
    result: Any = None


class JsonRpcErrorResponse(BaseModel):
    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId = None
    error: JsonRpcError


class McpTool(BaseModel):
    name: str
    description: str
    inputSchema: Dict[str, Any]


class McpResource(BaseModel):
    uri: str
    name: str
    description: Optional[str] = None
    mimeType: Optional[str] = None


class McpPromptArgument(BaseModel):
    name: str
    description: Optional[str] = None
    required: bool = False


class McpPrompt(BaseModel):
    name: str
    description: Optional[str] = None
    arguments: List[McpPromptArgument] = Field(default_factory=list)


class McpCapabilities(BaseModel):
    model_config = ConfigDict(extra="allow")

    tools: Optional[Dict[str, Any]] = None
    resources: Optional[Dict[str, Any]] = None
    prompts: Optional[Dict[str, Any]] = None
    logging: Optional[Dict[str, Any]] = None


class McpInitializeResult(BaseModel):
    protocolVersion: str = "2024-11-05"
    capabilities: McpCapabilities
    serverInfo: Dict[str, Any]


class McpCallToolResult(BaseModel):
    content: List[Dict[str, Any]]
    isError: Optional[bool] = False


def extract_request_id(data: Any) -> RequestId:
    """Return the ``id`` of a raw envelope if it is usable for correlation, else None"""
    if not isinstance(data, dict):
        return None
    request_id = data.get("id")
    if isinstance(request_id, bool) or not isinstance(request_id, (str, int, float)):
        return None
    return request_id


def create_request(request_id: RequestId, method: str, params: Any = None) -> Dict[str, Any]:
    """Create a JSON-RPC 2.0 request, leaving out ``params`` when there are none"""
    request = JsonRpcRequest(jsonrpc=JSONRPC_VERSION, id=request_id, method=method, params=params)
    return request.model_dump(exclude_none=request.params is None)


def create_success_response(request_id: RequestId, result: Any) -> Dict[str, Any]:
    """Create a successful JSON-RPC response; ``id`` and ``result`` are always present"""
    return JsonRpcSuccessResponse(id=request_id, result=result).model_dump()


def create_error_response(request_id: RequestId, code: int, message: str, data: Any = None) -> Dict[str, Any]:
    """Create an error JSON-RPC response; ``data`` is omitted when not given"""
    error = JsonRpcError(code=code, message=message, data=data)
    response = JsonRpcErrorResponse(id=request_id, error=error).model_dump()
    response["error"] = error.model_dump(exclude_none=True)
    return response
