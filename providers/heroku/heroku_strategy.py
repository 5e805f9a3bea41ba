"""
Heroku authentication strategy.

Register an application on your Heroku account settings page to obtain a
client id and secret, then expose them to the app as HEROKU_CLIENT_ID and
HEROKU_CLIENT_SECRET.

The requested scope defaults to "identity". A different scope can be set
with the HEROKU_DEFAULT_SCOPE setting, or per request:

    /auth/heroku?scope=global

A `state` query parameter on the request is forwarded to Heroku, which
hands it back on the callback.
"""
from typing import Optional
from core.auth.context import AuthContext
from core.auth.models import Credentials, Info, Extra
from core.interfaces.auth_strategy import AuthStrategy
from integrations.oauth2_client import AccessToken, OAuth2Error
from providers.heroku.heroku_oauth import HerokuOAuth
from utils.logger import logger


class HerokuStrategy(AuthStrategy):
    """Heroku implementation of AuthStrategy"""

    ACCOUNT_URL = "https://api.heroku.com/account"

    # Key used when Heroku rejects a code without saying why
    UNKNOWN_ERROR = "unknown_error"

    name = "heroku"
    default_options = {"default_scope": "identity"}

    def __init__(self, oauth: HerokuOAuth, **options):
        super().__init__(**options)
        self.oauth = oauth

    def handle_request(self, ctx: AuthContext) -> AuthContext:
        """Redirect to the Heroku consent page"""
        scope = ctx.params.get("scope") or self.option("default_scope")
        params = {"redirect_uri": ctx.callback_url, "scope": scope}

        if "state" in ctx.params:
            params["state"] = ctx.params["state"]

        return ctx.redirect(self.oauth.authorize_url(params))

    async def handle_callback(self, ctx: AuthContext) -> AuthContext:
        """
        Exchange the code and fetch the Heroku account.

        Failures reported by Heroku are recorded on the context. OAuth2Error
        from the token exchange is left to the caller.
        """
        if "code" not in ctx.params:
            logger.warning("Heroku callback received without a code")
            return ctx.set_errors([self.error("missing_code", "No code received")])

        code = ctx.params["code"]
        token = await self.oauth.get_token(
            {"code": code, "redirect_uri": ctx.callback_url}
        )

        if token.access_token is None:
            key = token.other_params.get("error") or self.UNKNOWN_ERROR
            logger.warning(f"Heroku token exchange rejected: {key}")
            return ctx.set_errors([self.error(key, token.other_params.get("error_description"))])

        return await self._fetch_user(ctx, token)

    def handle_cleanup(self, ctx: AuthContext) -> AuthContext:
        """Clear the raw Heroku responses from the context"""
        ctx.put_private("heroku_user", None)
        ctx.put_private("heroku_token", None)
        return ctx

    def uid(self, ctx: AuthContext) -> Optional[str]:
        """Heroku users are identified by email"""
        return self._user(ctx).get("email")

    def credentials(self, ctx: AuthContext) -> Credentials:
        token: AccessToken = ctx.private.get("heroku_token")
        if token is None:
            return Credentials()

        scope = token.other_params.get("scope") or ""
        scopes = [s for s in scope.split(",") if s]

        return Credentials(
            token=token.access_token,
            refresh_token=token.refresh_token,
            expires_at=token.expires_at,
            token_type=token.token_type,
            expires=bool(token.expires_at),
            scopes=scopes,
        )

    def info(self, ctx: AuthContext) -> Info:
        user = self._user(ctx)
        return Info(name=user.get("name"), email=user.get("email"))

    def extra(self, ctx: AuthContext) -> Extra:
        return Extra(
            raw_info={
                "token": ctx.private.get("heroku_token"),
                "user": ctx.private.get("heroku_user"),
            }
        )

    async def _fetch_user(self, ctx: AuthContext, token: AccessToken) -> AuthContext:
        ctx.put_private("heroku_token", token)

        try:
            response = await self.oauth.get(token, self.ACCOUNT_URL)
        except OAuth2Error as e:
            logger.warning(f"Failed to fetch Heroku account: {e.reason}")
            return ctx.set_errors([self.error("OAuth2", e.reason)])

        if response.status_code == 401:
            logger.warning("Heroku rejected the access token")
            return ctx.set_errors([self.error("token", "unauthorized")])

        if 200 <= response.status_code < 400:
            if not isinstance(response.body, dict):
                logger.warning("Heroku account response was not a JSON object")
                return ctx.set_errors([self.error("OAuth2", "invalid profile response")])
            return ctx.put_private("heroku_user", response.body)

        logger.warning(f"Heroku account request returned {response.status_code}")
        message = None
        if isinstance(response.body, dict):
            message = response.body.get("message")
        return ctx.set_errors([
            self.error(f"http_{response.status_code}", message or f"HTTP {response.status_code}")
        ])

    @staticmethod
    def _user(ctx: AuthContext) -> dict:
        user = ctx.private.get("heroku_user")
        return user if isinstance(user, dict) else {}
