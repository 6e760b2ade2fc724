import sys
import logging
from typing import Literal, Optional
from fastapi import FastAPI
from pydantic import BaseModel, Field

from config import ServerConfig, load_server_config
from http_adapter import HTTPAdapter, HTTPAdapterMiddleware
from mcp_router import McpRouter

logger = logging.getLogger(__name__)


# --- Example Tool ---
class CalculatorArgs(BaseModel):
    operation: Literal["add", "subtract", "multiply", "divide"]
    a: str = Field(description="First operand")
    b: str = Field(description="Second operand")


def calculator(args: CalculatorArgs):
    """Perform one arithmetic operation on two numeric strings."""
    a = float(args.a)
    b = float(args.b)

    if args.operation == "add":
        result = a + b
    elif args.operation == "subtract":
        result = a - b
    elif args.operation == "multiply":
        result = a * b
    else:
        if b == 0:
            raise ValueError("Division by zero")
        result = a / b

    # Render whole numbers without a trailing ".0"
    text = str(int(result)) if result.is_integer() else str(result)
    return {"content": [{"type": "text", "text": text}]}


def build_router() -> McpRouter:
    router = McpRouter("http-example-server", "1.0.0", capabilities={"logging": {}})
    router.add_tool(
        "calculator",
        "Perform basic calculations. Add, subtract, multiply, divide. "
        "Invoke this every time you need to perform a calculation.",
        CalculatorArgs,
        calculator
    )
    return router


# --- App Initialization ---
def create_app(config: Optional[ServerConfig] = None, router=None) -> FastAPI:
    config = config or ServerConfig()
    router = router or build_router()

    app = FastAPI(
        title="Remote MCP HTTP Server",
        version="1.0.0",
        description="MCP JSON-RPC 2.0 endpoint over HTTP"
    )
    adapter = HTTPAdapter(router, path=config.path, cors=config.cors)
    app.add_middleware(HTTPAdapterMiddleware, adapter=adapter)

    @app.get("/", summary="Health check", tags=["internal-admin"])
    async def root():
        """Basic health check endpoint."""
        return {"status": "healthy", "service": "remote-mcp-http", "mcp_path": config.path}

    return app


settings = load_server_config()
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr
    )
    logger.info("HTTP MCP Server listening on http://localhost:%s%s", settings.port, settings.path)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
