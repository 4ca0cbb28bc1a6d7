import logging
from urllib.parse import urlsplit

from authlib.integrations.base_client.errors import OAuthError
from flask import Blueprint, current_app, jsonify, request, session, url_for

from diary.auth.oauth import google_profile, oauth
from diary.auth_client import (
    AuthUser,
    auth_required,
    clear_auth_cookies,
    current_user,
    issue_auth_response,
)
from diary.errors import NotFoundError, UpstreamFailure, ValidationError
from diary.service.clock import utc_now_iso


logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__, url_prefix="/api")


def register_auth_routes(app):
    """Register authentication routes with the Flask app."""
    app.register_blueprint(bp)


def _repository():
    return current_app.extensions["diary"]["repository"]


def _google_client():
    if not current_app.config.get("GOOGLE_OAUTH_ENABLED"):
        raise NotFoundError("Google login is not configured")
    return oauth.google


def _safe_next(value):
    # Only same-site absolute paths; anything else falls back to the root
    if not value or not value.startswith("/") or value.startswith("//"):
        return "/"
    if "\\" in value or any(ord(char) < 0x20 or ord(char) == 0x7F for char in value):
        return "/"
    parts = urlsplit(value)
    if parts.scheme or parts.netloc:
        return "/"
    return value


@bp.route("/oauth/google/redirect_url", methods=["GET"])
def google_redirect_url():
    _google_client()
    login_url = url_for(
        "auth.google_login",
        next=_safe_next(request.args.get("next")),
        _external=True,
    )
    return {"redirectUrl": login_url}


@bp.route("/oauth/google/login", methods=["GET"])
def google_login():
    client = _google_client()
    session["oauth_next"] = _safe_next(request.args.get("next"))
    redirect_uri = url_for("auth.google_callback", _external=True)
    return client.authorize_redirect(redirect_uri)


@bp.route("/oauth/google/callback", methods=["GET"])
def google_callback():
    client = _google_client()
    try:
        token = client.authorize_access_token()
    except OAuthError as exc:
        logger.warning("google code exchange failed", extra={"reason": exc.error})
        raise UpstreamFailure("Google login failed") from exc

    profile = google_profile(client, token)
    if profile is None:
        logger.warning("google userinfo missing subject")
        raise UpstreamFailure("Google login failed")

    user_id, email, name = profile
    user = AuthUser(user_id=user_id, email=email, name=name)
    _repository().ensure_user(user.id, user.email, user.name, utc_now_iso())
    logger.info("google login success", extra={"user_id": user.id})
    return issue_auth_response(user, next_url=session.pop("oauth_next", "/"))


@bp.route("/auth/dev-login", methods=["POST"])
def dev_login():
    """Sign in as a local user without an identity provider."""
    if not current_app.config.get("AUTH_DEV_LOGIN_ENABLED", False):
        raise NotFoundError("Dev login is disabled")

    data = request.get_json(silent=True) or {}
    email = str(data.get("email", "")).strip().lower()
    if not email:
        raise ValidationError(
            "invalid request",
            details=[{"field": "email", "message": "Email is required."}],
        )
    name = data.get("name") or email.split("@", 1)[0]

    user = AuthUser(user_id=f"dev:{email}", email=email, name=name)
    _repository().ensure_user(user.id, user.email, user.name, utc_now_iso())
    logger.info("dev login success", extra={"user_id": user.id})
    return issue_auth_response(user)


@bp.route("/users/me", methods=["GET"])
@auth_required()
def users_me():
    return {"user": current_user.to_dict()}


@bp.route("/logout", methods=["GET", "POST"])
def logout():
    logger.info("logout", extra={"user_id": current_user.id})
    return clear_auth_cookies()
