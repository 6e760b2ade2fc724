"""
HTTP side of the bridge: terminates JSON-RPC 2.0 POSTs and dispatches them to a router.

JSON-RPC outcomes, successful or not, are always sent with HTTP status 200.
The request body is buffered in full with no size limit or read timeout, so
put the adapter behind a proxy that enforces both before exposing it to
untrusted clients.
"""
import json
import math
import logging
from typing import Any, Dict
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.types import ASGIApp, Receive, Scope, Send

from errors import InvalidParamsError
from mcp_methods import dispatch
from mcp_types import (
    JsonRpcRequest, PARSE_ERROR, INVALID_REQUEST, INTERNAL_ERROR,
    create_error_response, create_success_response, extract_request_id
)

logger = logging.getLogger(__name__)

DEFAULT_PATH = "/mcp/http"


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def _parse_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"{text} is out of range")
    return value


class HTTPAdapter:
    def __init__(self, router, path: str = DEFAULT_PATH, cors: bool = True):
        self.router = router
        self.path = path
        self.cors = cors

    def _cors_headers(self) -> Dict[str, str]:
        if not self.cors:
            return {}
        return {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
        }

    async def handle(self, scope: Scope, receive: Receive, send: Send) -> bool:
        """
        Handle one ASGI request if it targets the configured path.

        Returns False without sending anything when the path does not match,
        so the caller can hand the request to another application.
        """
        if scope["type"] != "http" or scope["path"] != self.path:
            return False

        request = Request(scope, receive)
        headers = self._cors_headers()

        if request.method == "OPTIONS":
            response = Response(status_code=204, headers=headers)
        else:
            response = self._render(await self._process(request), headers)

        await response(scope, receive, send)
        return True

    async def _process(self, request: Request) -> Dict[str, Any]:
        if request.method != "POST":
            return create_error_response(None, INVALID_REQUEST, "Invalid Request: Only POST is supported")

        body = await request.body()
        try:
            data = json.loads(body, parse_constant=_reject_constant, parse_float=_parse_float)
        except ValueError:
            logger.debug("Rejecting body that is not JSON")
            return create_error_response(None, PARSE_ERROR, "Parse error")

        try:
            rpc_request = JsonRpcRequest.model_validate(data)
        except ValidationError:
            return create_error_response(extract_request_id(data), INVALID_REQUEST, "Invalid Request")

        logger.debug("JSON-RPC %s (id=%r)", rpc_request.method, rpc_request.id)
        try:
            result = await dispatch(self.router, rpc_request.method, rpc_request.params)
            return create_success_response(rpc_request.id, jsonable_encoder(result))
        except InvalidParamsError as e:
            logger.info("Invalid params for %s: %s", rpc_request.method, e.detail)
            return create_error_response(rpc_request.id, INVALID_REQUEST, "Invalid Request", e.detail)
        except Exception as e:
            logger.warning("%s failed: %s", rpc_request.method, e)
            return create_error_response(rpc_request.id, INTERNAL_ERROR, "Internal error", str(e))

    def _render(self, payload: Dict[str, Any], headers: Dict[str, str]) -> Response:
        try:
            return JSONResponse(payload, headers=headers)
        except ValueError as e:
            # router results may hold NaN or infinite floats
            logger.warning("Could not encode result as JSON: %s", e)
            error = create_error_response(payload.get("id"), INTERNAL_ERROR, "Internal error", str(e))
            return JSONResponse(error, headers=headers)

    def create_handler(self) -> ASGIApp:
        """Standalone ASGI app that answers 404 for every path but the adapter's own."""
        async def handler(scope: Scope, receive: Receive, send: Send) -> None:
            handled = await self.handle(scope, receive, send)
            if not handled and scope["type"] == "http":
                await PlainTextResponse("Not Found", status_code=404)(scope, receive, send)

        return handler


class HTTPAdapterMiddleware:
    """Mounts an HTTPAdapter in front of another ASGI app, e.g. ``app.add_middleware(HTTPAdapterMiddleware, adapter=...)``."""

    def __init__(self, app: ASGIApp, adapter: HTTPAdapter):
        self.app = app
        self.adapter = adapter

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if await self.adapter.handle(scope, receive, send):
            return
        await self.app(scope, receive, send)
