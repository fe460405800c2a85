import json
import logging
from pathlib import Path
from typing import Dict, List, Any, Optional

from models import ToolDescription

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "tools" / "tools_config.json"


class ToolsManager:
    """ツール定義の一元管理クラス（起動時に一度だけ読み込み、以後は読み取り専用）"""

    def __init__(self, config_path: Optional[Path] = None):
        path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        with open(path, 'r', encoding='utf-8') as f:
            self.config = json.load(f)
        self._descriptions = [
            ToolDescription(**{key: tool[key] for key in ("name", "description", "inputSchema")})
            for tool in self.config["tools"]
        ]
        logger.info(f"[ToolsManager] Loaded {len(self._descriptions)} tools from {path.name}")

    def get_mcp_tools_format(self) -> List[Dict[str, Any]]:
        """tools/list用のツール一覧（スキーマはそのまま）"""
        return [tool.model_dump() for tool in self._descriptions]

    def get_tools_summary(self) -> List[Dict[str, Any]]:
        """ドキュメント用の name/description 一覧"""
        return [
            {"name": tool.name, "description": tool.description}
            for tool in self._descriptions
        ]

    def get_tool_examples(self) -> List[Dict[str, Any]]:
        """ドキュメント用の呼び出し例"""
        return [
            {"name": tool["name"], "params": tool.get("example", {})}
            for tool in self.config["tools"]
        ]

    def get_tool_names(self) -> List[str]:
        """全ツール名のリスト"""
        return [tool.name for tool in self._descriptions]
