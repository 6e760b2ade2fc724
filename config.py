"""
Configuration for the example server and the stdio bridge.

Values are read from the environment once, by the entry points, and passed
into the adapters. The adapters themselves never look at os.environ.
"""
import os
from typing import Dict, Mapping, Optional
from pydantic import BaseModel, Field

from http_adapter import DEFAULT_PATH

HEADER_ENV_PREFIX = "HTTP_HEADER_"
DEFAULT_REMOTE_URL = "http://localhost:9512"


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 9513
    path: str = DEFAULT_PATH
    cors: bool = True
    log_level: str = "INFO"


class ForwarderConfig(BaseModel):
    remote_url: str = DEFAULT_REMOTE_URL
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout: float = 30.0
    log_level: str = "ERROR"


def headers_from_env(environ: Mapping[str, str]) -> Dict[str, str]:
    """
    Collect static HTTP headers from HTTP_HEADER_* variables.

    HTTP_HEADER_X_API_KEY=secret becomes the header ``x-api-key: secret``.
    """
    headers = {}
    for key, value in environ.items():
        if not key.startswith(HEADER_ENV_PREFIX) or key == HEADER_ENV_PREFIX:
            continue
        name = key[len(HEADER_ENV_PREFIX):].lower().replace("_", "-")
        headers[name] = value
    return headers


def _flag(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off", "")


def load_server_config(environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    environ = os.environ if environ is None else environ
    return ServerConfig(
        host=environ.get("HOST", "0.0.0.0"),
        port=int(environ.get("PORT", 9513)),
        path=environ.get("MCP_HTTP_PATH", DEFAULT_PATH),
        cors=_flag(environ.get("MCP_HTTP_CORS", "true")),
        log_level=environ.get("LOG_LEVEL", "INFO").upper(),
    )


def load_forwarder_config(environ: Optional[Mapping[str, str]] = None) -> ForwarderConfig:
    environ = os.environ if environ is None else environ
    return ForwarderConfig(
        remote_url=environ.get("REMOTE_MCP_URL", DEFAULT_REMOTE_URL),
        headers=headers_from_env(environ),
        timeout=float(environ.get("REMOTE_MCP_TIMEOUT", 30.0)),
        log_level=environ.get("LOG_LEVEL", "ERROR").upper(),
    )
