import logging

from authlib.integrations.flask_client import OAuth

logger = logging.getLogger(__name__)

GOOGLE_METADATA_URL = "https://accounts.google.com/.well-known/openid-configuration"
# The journal only needs to know who is writing; no Google API scopes
GOOGLE_SCOPES = "openid email profile"

oauth = OAuth()


def init_oauth(app):
    """Register the Google client when credentials are configured.

    Sets ``GOOGLE_OAUTH_ENABLED`` so the login routes can answer 404 instead
    of failing inside authlib.
    """
    oauth.init_app(app)
    client_id = app.config.get("GOOGLE_CLIENT_ID")
    client_secret = app.config.get("GOOGLE_CLIENT_SECRET")
    enabled = bool(client_id and client_secret)
    app.config["GOOGLE_OAUTH_ENABLED"] = enabled
    if not enabled:
        logger.info("google login disabled, no client credentials")
        return False

    oauth.register(
        name="google",
        client_id=client_id,
        client_secret=client_secret,
        server_metadata_url=app.config.get("GOOGLE_METADATA_URL") or GOOGLE_METADATA_URL,
        client_kwargs={"scope": GOOGLE_SCOPES},
        # Let people with several Google accounts pick the journal's owner
        authorize_params={"prompt": "select_account"},
        overwrite=True,
    )
    return True


def google_profile(client, token):
    """Pull ``(sub, email, name)`` out of a token response, or None."""
    userinfo = token.get("userinfo") or client.userinfo(token=token)
    if not userinfo or not userinfo.get("sub"):
        return None
    if userinfo.get("email_verified") is False:
        logger.warning("google account email not verified", extra={"sub": userinfo["sub"]})
        return None
    return str(userinfo["sub"]), (userinfo.get("email") or "").lower(), userinfo.get("name")
