from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current instant as naive UTC, the form every stored timestamp uses."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
