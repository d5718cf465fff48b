import re
from datetime import UTC, datetime

API_KEY_NAME_RE = re.compile(r"^[A-Za-z0-9_-]{3,36}$")


def is_api_key_name(value: str) -> bool:
    return bool(API_KEY_NAME_RE.fullmatch(value))


def now() -> datetime:
    return datetime.now(UTC)
