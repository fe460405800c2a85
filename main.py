#!/usr/bin/env python3
"""
MCP Airbnb Protocol Server - モック Airbnb データ (MCP JSON-RPC/SSE + REST)
Port: $PORT (default 3000)
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse

from config import SERVER_CONFIG, MCP_CONFIG, RATE_LIMIT_CONFIG, CORS_CONFIG, LOG_CONFIG
from models import MCPRequest, MCPResponse, RequestId, INTERNAL_ERROR
from server.connection_registry import ConnectionRegistry
from server.mcp_dispatcher import MCPDispatcher
from server.rest_api import router as rest_router
from tools_manager import ToolsManager
from utils.middleware import RateLimitMiddleware, RequestLoggingMiddleware, SecurityHeadersMiddleware
from utils.time_util import utc_timestamp

# ログ設定
logging.basicConfig(level=LOG_CONFIG["level"], format=LOG_CONFIG["format"])
logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

# ツール管理インスタンス
tools_manager = ToolsManager()
dispatcher = MCPDispatcher(tools_manager)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{SERVER_CONFIG['title']} starting on port {SERVER_CONFIG['port']} ({SERVER_CONFIG['environment']})")
    logger.info(f"Protocol: Model Context Protocol (MCP) {MCP_CONFIG['protocol_version']}")
    logger.info(f"Tools: {', '.join(tools_manager.get_tool_names())}")
    yield
    # 開いている SSE ストリームを終了させる（シャットダウンを待たせない）
    closed = app.state.connection_registry.close_all()
    logger.info(f"Shutting down, closed {closed} SSE connection(s)")


app = FastAPI(
    title=SERVER_CONFIG["title"],
    version=SERVER_CONFIG["version"],
    lifespan=lifespan,
)
app.state.connection_registry = ConnectionRegistry(MCP_CONFIG["keepalive_interval"])

app.add_middleware(
    RateLimitMiddleware,
    max_requests=RATE_LIMIT_CONFIG["max_requests"],
    window_seconds=RATE_LIMIT_CONFIG["window_seconds"],
    path_prefix=RATE_LIMIT_CONFIG["path_prefix"],
)
app.add_middleware(SecurityHeadersMiddleware)

# CORS設定
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_CONFIG["allow_origins"],
    allow_credentials=False,
    allow_methods=CORS_CONFIG["allow_methods"],
    allow_headers=CORS_CONFIG["allow_headers"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(rest_router)


@app.get("/")
async def root():
    return {
        "message": SERVER_CONFIG["title"],
        "version": SERVER_CONFIG["version"],
        "protocol": f"Model Context Protocol (MCP) {MCP_CONFIG['protocol_version']}",
        "description": "MCP server and REST API for Airbnb search and listing details (mock data)",
        "endpoints": {
            "mcp_sse": "GET /mcp - Server-Sent Events endpoint",
            "mcp_rpc": "POST /mcp - JSON-RPC endpoint",
            "search": "POST /api/search - Search Airbnb listings",
            "listing": "POST /api/listing/{id} - Get listing details",
            "health": "GET /health - Health check",
        },
        "tools": tools_manager.get_tools_summary(),
        "usage": {
            "n8n_mcp_client": "Use GET /mcp as SSE endpoint in n8n MCP Client node",
            "example_tools": tools_manager.get_tool_examples(),
            "searchExample": {
                "method": "POST",
                "url": "/api/search",
                "body": {
                    "location": "Miami Beach",
                    "checkin": "2025-08-15",
                    "checkout": "2025-08-20",
                    "adults": 2,
                },
            },
        },
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": utc_timestamp(),
        "service": SERVER_CONFIG["title"],
        "version": SERVER_CONFIG["version"],
        "protocol": f"MCP {MCP_CONFIG['protocol_version']}",
        "environment": SERVER_CONFIG["environment"],
        "uptime": round(time.monotonic() - STARTED_AT, 3),
        "endpoints": {
            "mcp_sse": "GET /mcp",
            "mcp_rpc": "POST /mcp",
            "search": "POST /api/search",
            "listing": "POST /api/listing/{id}",
            "health": "GET /health",
        },
    }


@app.get("/mcp")
async def mcp_sse(request: Request):
    """MCP SSE エンドポイント（接続イベント + 定期 ping）"""
    registry: ConnectionRegistry = request.app.state.connection_registry
    return EventSourceResponse(
        registry.stream(),
        sep="\n",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
        },
    )


def _extract_request_id(payload: Any) -> RequestId:
    if isinstance(payload, dict):
        request_id = payload.get("id")
        if isinstance(request_id, (int, float, str)) and not isinstance(request_id, bool):
            return request_id
    return None


@app.post("/mcp")
async def mcp_endpoint(request: Request):
    """MCPプロトコルエンドポイント"""
    payload: Any = None
    try:
        payload = await request.json()
        message = MCPRequest.model_validate(payload)
        response = await dispatcher.handle_message(message)
        logger.debug(f"[MCP_ENDPOINT] Sending response: {response.to_wire()}")
        return JSONResponse(response.to_wire())

    except ValidationError as e:
        logger.error(f"[MCP_ENDPOINT] Invalid JSON-RPC message: {e}")
    except Exception as e:
        logger.exception(f"[MCP_ENDPOINT] MCP error: {e}")

    error_response = MCPResponse.failure(_extract_request_id(payload), INTERNAL_ERROR, "Internal error")
    return JSONResponse(status_code=500, content=error_response.to_wire())


if __name__ == "__main__":
    import uvicorn
    # SIGTERM/SIGINT: 処理中リクエストを待たずに終了
    uvicorn.run(
        app,
        host=SERVER_CONFIG["host"],
        port=SERVER_CONFIG["port"],
        timeout_graceful_shutdown=SERVER_CONFIG["shutdown_timeout"],
    )
