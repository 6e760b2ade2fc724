"""
Stdio side of the bridge: an MCP server on stdin/stdout that forwards every
call to a remote HTTP JSON-RPC endpoint.
"""
import inspect
import itertools
import logging
from typing import Any, Callable, Dict, Optional
import httpx

from errors import RemoteHTTPError, RemoteRPCError
from mcp_methods import METHODS
from mcp_stdio import StdioServer
from mcp_types import create_request

logger = logging.getLogger(__name__)

CLIENT_NAME = "Remote MCP HTTP Client"
CLIENT_VERSION = "1.0.0"
CLIENT_CAPABILITIES = {
    "tools": {"listChanged": True},
    "resources": {"subscribe": True, "listChanged": True},
    "prompts": {"listChanged": True},
    "logging": {},
}

ErrorCallback = Callable[[str, Exception], Any]


class HTTPMCPClient:
    def __init__(self, remote_url: str, headers: Optional[Dict[str, str]] = None,
                 on_error: Optional[ErrorCallback] = None, timeout: float = 30.0,
                 server: Optional[StdioServer] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.remote_url = remote_url
        self.headers = dict(headers or {})
        self.timeout = timeout
        self.server = server or StdioServer(CLIENT_NAME, CLIENT_VERSION, CLIENT_CAPABILITIES)
        self.on_error = on_error or self._log_error
        self._transport = transport
        self._request_ids = itertools.count(1)

    @classmethod
    def from_config(cls, config, **kwargs) -> "HTTPMCPClient":
        """Build a client from a config.ForwarderConfig"""
        return cls(config.remote_url, headers=config.headers, timeout=config.timeout, **kwargs)

    async def _log_error(self, method: str, error: Exception):
        await self.server.send_logging_message("error", f"{method}: {error}")

    def _request_headers(self) -> Dict[str, str]:
        headers = {
            name: value for name, value in self.headers.items()
            if name.lower() != "content-type"
        }
        headers["Content-Type"] = "application/json"
        return headers

    async def send_request(self, method: str, params: Any = None) -> Any:
        """
        Forward one call to the remote endpoint and unwrap its result.

        Raises:
            RemoteHTTPError: If the request fails, the status is not 2xx or the body is not a JSON-RPC response.
            RemoteRPCError: If the remote answers with a JSON-RPC error.
        """
        # Allocated before any await so concurrent calls never share an id
        request = create_request(next(self._request_ids), method, params)
        logger.debug("Forwarding %s (id=%s) to %s", method, request["id"], self.remote_url)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(self.remote_url, json=request, headers=self._request_headers())
            except httpx.HTTPError as e:
                raise RemoteHTTPError(f"HTTP request failed: {e}") from e

        if not response.is_success:
            raise RemoteHTTPError(f"HTTP error! status: {response.status_code}", response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise RemoteHTTPError(f"Invalid JSON-RPC response: {e}", response.status_code) from e
        if not isinstance(payload, dict):
            raise RemoteHTTPError("Invalid JSON-RPC response: expected an object", response.status_code)

        error = payload.get("error")
        if error is not None:
            if not isinstance(error, dict):
                error = {"message": str(error)}
            raise RemoteRPCError(error.get("code", 0), error.get("message", ""), error.get("data"))

        return payload.get("result")

    def _make_handler(self, method: str):
        async def handler(params: Any) -> Any:
            try:
                return await self.send_request(method, params)
            except Exception as e:
                logger.error("%s failed: %s", method, e)
                await self._report(method, e)
                raise

        return handler

    async def _report(self, method: str, error: Exception):
        try:
            outcome = self.on_error(method, error)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception("Error callback for %s failed", method)

    def setup_handlers(self):
        """Register one forwarding handler per known MCP method on the stdio server"""
        for method in METHODS:
            self.server.set_request_handler(method, self._make_handler(method))

    async def start(self):
        """Register handlers and serve the stdio connection until it closes"""
        self.setup_handlers()
        logger.info("Forwarding MCP calls to %s", self.remote_url)
        await self.server.run()
