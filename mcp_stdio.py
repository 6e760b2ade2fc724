"""
Line-delimited JSON-RPC 2.0 server over stdin/stdout.

One JSON object per line in each direction. stdout carries protocol frames
only; diagnostics go through logging (configured onto stderr by the entry
points).
"""
import sys
import json
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Set, TextIO
from pydantic import ValidationError

from errors import MethodNotFoundError
from mcp_types import (
    JsonRpcRequest, McpCapabilities, McpInitializeResult,
    PARSE_ERROR, INVALID_REQUEST, METHOD_NOT_FOUND, INTERNAL_ERROR,
    create_error_response, create_success_response, extract_request_id
)

logger = logging.getLogger(__name__)

RequestHandler = Callable[[Any], Awaitable[Any]]


class StdioServer:
    def __init__(self, name: str, version: str, capabilities: Optional[Dict[str, Any]] = None,
                 stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.name = name
        self.version = version
        self.capabilities = McpCapabilities(**(capabilities or {}))
        self.request_handlers: Dict[str, RequestHandler] = {}
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._write_lock = asyncio.Lock()
        self._tasks: Set[asyncio.Task] = set()

    def set_request_handler(self, method: str, handler: RequestHandler):
        """Register the coroutine handling ``method``; a later call for the same method replaces it"""
        self.request_handlers[method] = handler

    async def _write(self, message: Dict[str, Any]):
        line = json.dumps(message)
        async with self._write_lock:
            self._stdout.write(line + "\n")
            self._stdout.flush()

    async def send_logging_message(self, level: str, data: Any, logger_name: Optional[str] = None):
        """Send a notifications/message logging notification to the client"""
        params = {"level": level, "data": data}
        if logger_name:
            params["logger"] = logger_name
        await self._write({"jsonrpc": "2.0", "method": "notifications/message", "params": params})

    def _initialize_result(self) -> Dict[str, Any]:
        return McpInitializeResult(
            capabilities=self.capabilities,
            serverInfo={"name": self.name, "version": self.version}
        ).model_dump(exclude_none=True)

    async def _call(self, method: str, params: Any) -> Any:
        handler = self.request_handlers.get(method)
        if handler is not None:
            return await handler(params)
        if method == "ping":
            return {}
        if method == "initialize":
            return self._initialize_result()
        raise MethodNotFoundError(method)

    async def process(self, line: str) -> Optional[Dict[str, Any]]:
        """Handle one inbound frame and return the response to write, or None for notifications"""
        try:
            message = json.loads(line)
        except ValueError:
            return create_error_response(None, PARSE_ERROR, "Parse error")

        # Replies to server-initiated requests; this server never sends any
        if isinstance(message, dict) and "method" not in message and ("result" in message or "error" in message):
            logger.debug("Ignoring unsolicited response id=%r", message.get("id"))
            return None

        try:
            request = JsonRpcRequest.model_validate(message)
        except ValidationError:
            return create_error_response(extract_request_id(message), INVALID_REQUEST, "Invalid Request")

        if "id" not in message:
            logger.debug("Notification %s", request.method)
            return None

        try:
            result = await self._call(request.method, request.params)
        except MethodNotFoundError as e:
            return create_error_response(request.id, METHOD_NOT_FOUND, "Method not found", e.method)
        except Exception as e:
            return create_error_response(request.id, INTERNAL_ERROR, str(e))

        return create_success_response(request.id, result)

    async def _handle_line(self, line: str):
        response = await self.process(line)
        if response is not None:
            await self._write(response)

    async def run(self):
        """Serve requests until stdin reaches EOF, then wait for outstanding requests"""
        logger.info("%s %s serving on stdio", self.name, self.version)
        while True:
            line = await asyncio.to_thread(self._stdin.readline)
            if not line:
                logger.info("EOF on stdin, shutting down")
                break

            line = line.strip()
            if not line:
                continue

            # Each request runs in its own task so slow calls do not block the reader
            task = asyncio.create_task(self._handle_line(line))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        results = await asyncio.gather(*list(self._tasks), return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error("Failed to answer request: %s", result)
