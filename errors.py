"""
Exceptions raised while bridging MCP calls between stdio and HTTP.
"""
from typing import Any, Optional


class BridgeError(Exception):
    """Base class for failures raised by the bridge itself."""


class MethodNotFoundError(BridgeError):
    def __init__(self, method: str):
        super().__init__(f"Method not found: {method}")
        self.method = method


class InvalidParamsError(BridgeError):
    """Raised when a request's params do not match the method's parameter model."""

    def __init__(self, method: str, detail: str):
        super().__init__(f"Invalid params for {method}: {detail}")
        self.method = method
        self.detail = detail


class RemoteHTTPError(BridgeError):
    """The HTTP leg failed: network error, non-2xx status or a body that is not a JSON-RPC response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RemoteRPCError(BridgeError):
    """The remote peer answered with a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(f"JSON-RPC error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data
