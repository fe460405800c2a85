import json

from tools_manager import ToolsManager


def test_loads_two_tools():
    manager = ToolsManager()

    assert manager.get_tool_names() == ["airbnb_search", "airbnb_listing_details"]


def test_mcp_format_hides_examples():
    manager = ToolsManager()
    search = manager.get_mcp_tools_format()[0]

    assert "example" not in search
    assert search["inputSchema"]["required"] == ["location"]
    assert search["inputSchema"]["properties"]["checkin"]["pattern"] == "^\\d{4}-\\d{2}-\\d{2}$"


def test_custom_config_path(tmp_path):
    config_path = tmp_path / "tools.json"
    config_path.write_text(json.dumps({"tools": [
        {"name": "echo", "description": "Echo", "inputSchema": {"type": "object"}},
    ]}), encoding="utf-8")

    manager = ToolsManager(config_path)

    assert manager.get_tools_summary() == [{"name": "echo", "description": "Echo"}]
    assert manager.get_tool_examples() == [{"name": "echo", "params": {}}]
