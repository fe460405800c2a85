from datetime import datetime, timezone


def utc_timestamp() -> str:
    """ISO-8601 UTC（ミリ秒, "Z" 付き）"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
