"""
Password hashing and session tokens.

Passwords: salted PBKDF2-HMAC-SHA256. Tokens: `<b64 json payload>.<hex hmac>`
carrying `user.id`, `iat` and `exp`.
"""
import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Dict, Optional

from errors import AuthError

ITERATIONS = 100_000


def hash_password(password: str, salt: Optional[str] = None) -> Dict[str, str]:
    salt_bytes = os.urandom(16) if salt is None else base64.b64decode(salt)
    hashed = hashlib.pbkdf2_hmac("sha256", password.encode(), salt_bytes, ITERATIONS)
    return {
        "salt": base64.b64encode(salt_bytes).decode(),
        "hash": base64.b64encode(hashed).decode(),
    }


def verify_password(password: str, salt: str, stored_hash: str) -> bool:
    calc = hash_password(password, salt)
    return hmac.compare_digest(calc["hash"], stored_hash)


def _sign(data: str, secret: str) -> str:
    return hmac.new(secret.encode(), data.encode(), hashlib.sha256).hexdigest()


def sign_token(user_id: str, secret: str, ttl: int = 3600, issued_at: Optional[float] = None) -> str:
    iat = int(issued_at if issued_at is not None else time.time())
    payload = {"user": {"id": user_id}, "iat": iat, "exp": iat + ttl}
    data = base64.urlsafe_b64encode(json.dumps(payload, separators=(",", ":")).encode()).decode()
    return f"{data}.{_sign(data, secret)}"


def verify_token(token: str, secret: str, at: Optional[float] = None) -> Dict[str, Any]:
    try:
        data, sig = token.split(".")
        if not hmac.compare_digest(sig.encode(), _sign(data, secret).encode()):
            raise ValueError("Bad signature")
        payload = json.loads(base64.urlsafe_b64decode(data.encode()).decode())
    except (ValueError, UnicodeDecodeError):
        raise AuthError("Token is invalid")
    exp = payload.get("exp")
    if not isinstance(exp, int) or exp <= (at if at is not None else time.time()):
        raise AuthError("Token has expired")
    return payload


def authenticate(raw_token: Optional[str], secret: str) -> str:
    """Resolve a bearer token to a user id. The user may no longer exist."""
    if not raw_token:
        raise AuthError("No token, authorization denied")
    payload = verify_token(raw_token, secret)
    user = payload.get("user")
    if not isinstance(user, dict) or not user.get("id"):
        raise AuthError("Token is invalid")
    return str(user["id"])
