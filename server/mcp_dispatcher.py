# Airbnb MCP - JSON-RPC Dispatcher

import json
import logging
from typing import Dict, Any, Optional

from config import MCP_CONFIG, SERVER_CONFIG
from models import (
    MCPRequest,
    MCPResponse,
    RequestId,
    METHOD_NOT_FOUND,
    TOOL_EXECUTION_ERROR,
)
from tools_manager import ToolsManager
from tools.airbnb_search import search_listings
from tools.listing_details import get_listing_details

logger = logging.getLogger(__name__)


class ToolInvocationError(Exception):
    """tools/call の失敗（JSON-RPC -32000 に変換される）"""

    code = TOOL_EXECUTION_ERROR


class MCPDispatcher:
    """initialize / tools/list / tools/call のルーティング（リクエスト間で状態を持たない）"""

    def __init__(self, tools_manager: ToolsManager):
        self.tools_manager = tools_manager

    async def handle_message(self, message: MCPRequest) -> MCPResponse:
        logger.info(f"[MCP_DISPATCH] method={message.method} id={message.id}")
        method = message.method
        # オブジェクト以外の params は空として扱う
        params = message.params if isinstance(message.params, dict) else {}

        if method == "initialize":
            return self.handle_initialize(params, message.id)
        elif method == "tools/list":
            return self.handle_tools_list(params, message.id)
        elif method == "tools/call":
            return await self.handle_tools_call(params, message.id)

        logger.warning(f"[MCP_DISPATCH] Method not found: {method}")
        return MCPResponse.failure(message.id, METHOD_NOT_FOUND, f"Method not found: {method}")

    def handle_initialize(self, params: Dict[str, Any], request_id: RequestId) -> MCPResponse:
        return MCPResponse.success(request_id, {
            "protocolVersion": MCP_CONFIG["protocol_version"],
            "capabilities": {
                "tools": {"listChanged": False}
            },
            "serverInfo": {
                "name": MCP_CONFIG["server_name"],
                "version": SERVER_CONFIG["version"],
            },
        })

    def handle_tools_list(self, params: Dict[str, Any], request_id: RequestId) -> MCPResponse:
        return MCPResponse.success(request_id, {
            "tools": self.tools_manager.get_mcp_tools_format()
        })

    async def handle_tools_call(self, params: Dict[str, Any], request_id: RequestId) -> MCPResponse:
        tool_name = params.get("name")
        arguments = params.get("arguments")
        if not isinstance(arguments, dict):
            arguments = {}
        logger.info(f"[MCP_DISPATCH] Tool name: {tool_name}")
        logger.debug(f"[MCP_DISPATCH] Arguments: {arguments}")

        try:
            result = self._call_tool(tool_name, arguments)
        except ToolInvocationError as e:
            logger.warning(f"[MCP_DISPATCH] Tool call failed: {e}")
            return MCPResponse.failure(request_id, e.code, str(e))

        return MCPResponse.success(request_id, {
            "content": [
                {
                    "type": "text",
                    "text": json.dumps(result, indent=2, ensure_ascii=False),
                }
            ]
        })

    def _call_tool(self, tool_name: Optional[str], arguments: Dict[str, Any]) -> Dict[str, Any]:
        # ツール追加時は tools_config.json とこの分岐の両方に追加する
        if tool_name == "airbnb_search":
            return search_listings(arguments)
        elif tool_name == "airbnb_listing_details":
            if not arguments.get("id"):
                raise ToolInvocationError("Missing required parameter: id")
            return get_listing_details(arguments["id"], arguments)
        raise ToolInvocationError(f"Unknown tool: {tool_name}")
