from functools import wraps

from flask import current_app, g, jsonify, make_response, redirect, request
from werkzeug.local import LocalProxy

from diary.auth.jwt import create_session_token, decode_session_token


class AuthUser:
    def __init__(self, user_id=None, email="", name=None):
        self.id = user_id
        self.email = email
        self.name = name
        self.is_authenticated = user_id is not None

    def to_dict(self):
        return {"id": self.id, "email": self.email, "name": self.name}


class AnonymousUser(AuthUser):
    def __init__(self):
        super().__init__(user_id=None, email="")


current_user = LocalProxy(lambda: getattr(g, "auth_user", AnonymousUser()))


def _auth_settings():
    cookie_name = current_app.config.get("AUTH_SESSION_COOKIE_NAME", "diary_session")
    secret = current_app.config.get("AUTH_JWT_SECRET", "dev-jwt-secret")
    ttl = current_app.config.get("AUTH_SESSION_TTL_MINUTES", 60 * 24 * 60)
    # Flask needs None (not the string "None") to emit SameSite=None
    samesite_config = current_app.config.get("AUTH_COOKIE_SAMESITE", "Lax")
    samesite = None if samesite_config == "None" else samesite_config
    domain = current_app.config.get("AUTH_COOKIE_DOMAIN")
    secure = current_app.config.get("AUTH_COOKIE_SECURE", True)
    return cookie_name, secret, ttl, samesite, domain, secure


def _user_from_token(token, secret):
    payload, err = decode_session_token(token, secret)
    if err or not payload or not payload.get("sub"):
        return None
    return AuthUser(
        user_id=str(payload["sub"]),
        email=payload.get("email", ""),
        name=payload.get("name"),
    )


def _load_user_from_request():
    """Session cookie first, then an ``Authorization: Bearer`` header."""
    cookie_name, secret, _, _, _, _ = _auth_settings()

    token = request.cookies.get(cookie_name)
    if token:
        user = _user_from_token(token, secret)
        if user is not None:
            return user

    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        user = _user_from_token(auth_header.split(" ", 1)[1].strip(), secret)
        if user is not None:
            return user

    return AnonymousUser()


def init_auth(app):
    @app.before_request
    def load_auth_user():
        if app.config.get("SKIP_AUTH", False):
            # Fixed local user for development without an identity provider
            g.auth_user = AuthUser(user_id="dev-user", email="dev@localhost", name="Developer")
        else:
            g.auth_user = _load_user_from_request()


def auth_required():
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if current_user.is_authenticated:
                return func(*args, **kwargs)
            return jsonify({"error": "unauthorized"}), 401

        return wrapper

    return decorator


def _set_session_cookie(response, token):
    cookie_name, _, ttl, samesite, domain, secure = _auth_settings()
    response.set_cookie(
        cookie_name,
        token,
        max_age=ttl * 60,
        httponly=True,
        samesite=samesite,
        secure=secure,
        path="/",
        domain=domain,
    )
    return response


def issue_auth_response(user, next_url=None):
    """Sign a session token for ``user`` and attach it as a cookie.

    Browser flows get a redirect to ``next_url``; API callers get JSON.
    """
    _, secret, ttl, _, _, _ = _auth_settings()
    token = create_session_token(
        user_id=user.id,
        email=user.email,
        name=user.name,
        secret=secret,
        ttl_minutes=ttl,
    )

    if next_url is None:
        response = make_response({"success": True, "user": user.to_dict()})
    else:
        response = make_response(redirect(next_url))
    return _set_session_cookie(response, token)


def clear_auth_cookies():
    cookie_name, _, _, samesite, domain, _ = _auth_settings()
    response = make_response({"success": True})
    response.delete_cookie(
        cookie_name,
        path="/",
        domain=domain,
        samesite=samesite,
    )
    return response
