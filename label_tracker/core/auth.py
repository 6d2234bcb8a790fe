import hashlib
import hmac
import secrets


def generate_api_token() -> str:
    """Generate a new raw login token (returned once to the client)."""
    # urlsafe base64, ~43 chars for 32 bytes
    return secrets.token_urlsafe(32)


def hash_api_token(*, raw_token: str, secret_key: str) -> str:
    """Hash a raw token using HMAC-SHA256 with the server secret as pepper."""
    if not raw_token:
        raise ValueError("raw_token is required")
    if not secret_key:
        raise ValueError("secret_key is required")
    return hmac.new(secret_key.encode("utf-8"), raw_token.encode("utf-8"), hashlib.sha256).hexdigest()


def login_token_label(np: str) -> str:
    """One active login token per NP; the label identifies it for rotation."""
    return f"login:{np}"
