import base64
import hashlib
import secrets
from dataclasses import dataclass

MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class PasswordHashParams:
    algorithm: str = "pbkdf2_sha256"
    iterations: int = 210_000
    salt_bytes: int = 16


_DEFAULT = PasswordHashParams()


def _b64encode_nopad(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64decode_nopad(value: str) -> bytes:
    padded = value + "=" * ((4 - (len(value) % 4)) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


def hash_password(password: str, *, params: PasswordHashParams = _DEFAULT) -> str:
    """Hash password with PBKDF2-HMAC-SHA256.

    Stored format:
        pbkdf2_sha256$<iterations>$<salt_b64>$<hash_b64>
    """
    pw = (password or "").encode("utf-8")
    if not pw:
        raise ValueError("password is required")

    salt = secrets.token_bytes(params.salt_bytes)
    dk = hashlib.pbkdf2_hmac("sha256", pw, salt, params.iterations)
    return f"{params.algorithm}${params.iterations}${_b64encode_nopad(salt)}${_b64encode_nopad(dk)}"


def verify_password(password: str, stored: str) -> bool:
    pw = (password or "").encode("utf-8")
    if not pw:
        return False
    parts = (stored or "").split("$")
    if len(parts) != 4:
        return False
    alg, iters_s, salt_b64, dk_b64 = parts
    if alg != _DEFAULT.algorithm or not iters_s.isdigit():
        return False

    try:
        salt = _b64decode_nopad(salt_b64)
        expected = _b64decode_nopad(dk_b64)
    except ValueError:
        return False
    got = hashlib.pbkdf2_hmac("sha256", pw, salt, int(iters_s))
    return secrets.compare_digest(got, expected)


def default_password_for(np: str, prefix: str) -> str:
    """Facility convention for fresh or reset accounts: prefix + upper-cased NP."""
    return f"{prefix}{(np or '').strip().upper()}"
