import hashlib
import hmac
import secrets
from uuid import uuid4

KEY_SEPARATOR = "."


def generate_api_key() -> tuple[str, str]:
    """Return a fresh (identifier, secret) pair."""
    return str(uuid4()), secrets.token_urlsafe(32)


def format_api_key(identifier: str, secret: str) -> str:
    return f"{identifier}{KEY_SEPARATOR}{secret}"


def parse_api_key(raw_key: str) -> tuple[str, str] | None:
    """Split a raw key into (identifier, secret), or None if it is malformed."""
    identifier, sep, secret = raw_key.strip().partition(KEY_SEPARATOR)
    if not sep or not identifier or not secret:
        return None
    return identifier, secret


def hash_secret(secret: str, pepper: str) -> str:
    """HMAC-SHA256 of the secret half, keyed with the server pepper."""
    return hmac.new(pepper.encode(), secret.encode(), hashlib.sha256).hexdigest()


def verify_secret(secret: str, stored_hash: str, pepper: str) -> bool:
    return secrets.compare_digest(hash_secret(secret, pepper), stored_hash)
