# Airbnb MCP Mock Server Configuration

import os


def _env_int(name: str, default: int) -> int:
    """整数の環境変数を読む（不正値はデフォルト）"""
    try:
        return int(os.getenv(name, ""))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, ""))
    except ValueError:
        return default


# サーバー設定
SERVER_CONFIG = {
    "title": "MCP Airbnb Protocol Server",
    "version": "1.0.0",
    "host": "0.0.0.0",
    "port": _env_int("PORT", 3000),
    "environment": os.getenv("APP_ENV", "development"),
    "shutdown_timeout": 0,
}

# MCP設定
MCP_CONFIG = {
    "server_name": "mcp-airbnb-server",
    "protocol_version": "2024-11-05",
    "keepalive_interval": _env_float("KEEPALIVE_INTERVAL", 30.0),
}

# レート制限設定（/api/* のみ）
RATE_LIMIT_CONFIG = {
    "max_requests": _env_int("RATE_LIMIT", 100),
    "window_seconds": 15 * 60,
    "path_prefix": "/api/",
}

# CORS設定
CORS_CONFIG = {
    "allow_origins": [
        origin.strip()
        for origin in os.getenv("CORS_ORIGIN", "*").split(",")
        if origin.strip()
    ] or ["*"],
    "allow_methods": ["GET", "POST", "OPTIONS"],
    "allow_headers": ["Content-Type", "Authorization", "Accept", "Cache-Control"],
}

# ログ設定
LOG_CONFIG = {
    "level": os.getenv("LOG_LEVEL", "INFO").upper(),
    "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
}
