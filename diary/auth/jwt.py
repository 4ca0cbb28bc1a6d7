from datetime import datetime, timedelta, timezone

import jwt

SESSION_TOKEN_ISSUER = "ai-diary"
SESSION_TOKEN_TYPE = "session"
SESSION_TOKEN_ALGORITHM = "HS256"
# Sixty days, the same lifetime the session cookie gets
DEFAULT_SESSION_TTL_MINUTES = 60 * 24 * 60


def create_session_token(user_id, email, secret, ttl_minutes=DEFAULT_SESSION_TTL_MINUTES, name=None):
    """Sign the journal session token that identifies the owner of every record."""
    now = datetime.now(timezone.utc)
    payload = {
        "iss": SESSION_TOKEN_ISSUER,
        "sub": str(user_id),
        "email": email,
        "name": name,
        "type": SESSION_TOKEN_TYPE,
        "iat": now,
        "exp": now + timedelta(minutes=ttl_minutes),
    }
    return jwt.encode(payload, secret, algorithm=SESSION_TOKEN_ALGORITHM)


def decode_session_token(token, secret):
    """Return ``(payload, None)`` for a valid session token, else ``(None, reason)``."""
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[SESSION_TOKEN_ALGORITHM],
            issuer=SESSION_TOKEN_ISSUER,
            options={"require": ["exp", "iss", "sub"]},
        )
    except jwt.PyJWTError as exc:
        return None, str(exc)
    if payload.get("type") != SESSION_TOKEN_TYPE:
        return None, f"Invalid token type: expected {SESSION_TOKEN_TYPE}, got {payload.get('type')}"
    if not str(payload["sub"]).strip():
        return None, "Token subject is empty"
    return payload, None
