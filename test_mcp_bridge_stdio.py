import mcp_bridge_stdio
from http_client import HTTPMCPClient


def test_main_builds_client_from_environment(monkeypatch):
    started = []

    async def start(self):
        started.append(self)

    monkeypatch.setattr(HTTPMCPClient, "start", start)
    monkeypatch.setenv("REMOTE_MCP_URL", "https://mcp.example.com/mcp/http")
    monkeypatch.setenv("REMOTE_MCP_TIMEOUT", "12")
    monkeypatch.setenv("HTTP_HEADER_X_API_KEY", "secret")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    mcp_bridge_stdio.main()

    (client,) = started
    assert client.remote_url == "https://mcp.example.com/mcp/http"
    assert client.timeout == 12.0
    assert client.headers["x-api-key"] == "secret"
