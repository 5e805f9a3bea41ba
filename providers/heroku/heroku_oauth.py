import httpx
from typing import Any, Dict, Mapping
from authlib.common.errors import AuthlibBaseError
from authlib.common.urls import add_params_to_uri
from authlib.integrations.httpx_client import AsyncOAuth2Client
from integrations.oauth2_client import AccessToken, OAuth2Error, OAuth2Response
from utils.logger import logger


class HerokuOAuth:
    """
    OAuth2 client factory for Heroku.

    Client options are merged from three layers, later ones winning:
    the built-in DEFAULTS, the configuration given to the constructor
    (client_id, client_secret, ...) and per-call overrides.
    """

    DEFAULTS = {
        "authorize_url": "https://id.heroku.com/oauth/authorize",
        "token_url": "https://id.heroku.com/oauth/token",
        "timeout": 10.0,
    }

    CLIENT_OPTIONS = ("client_id", "client_secret", "redirect_uri", "headers", "timeout", "transport")

    def __init__(self, config: Mapping[str, Any] = None):
        self.config = dict(config or {})

    def options(self, **overrides) -> Dict[str, Any]:
        """Merged options, with the client credentials checked"""
        opts: Dict[str, Any] = {**self.DEFAULTS, **self.config, **overrides}

        for key in ("client_id", "client_secret"):
            value = opts.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"Heroku {key} must be a string, got {type(value).__name__}")

        return opts

    def client(self, **overrides) -> AsyncOAuth2Client:
        """Construct a client for requests to Heroku. No network I/O."""
        opts = self.options(**overrides)
        kwargs = {k: v for k, v in opts.items() if k in self.CLIENT_OPTIONS and v is not None}

        # Heroku reads the client credentials from the form body
        return AsyncOAuth2Client(token_endpoint_auth_method="client_secret_post", **kwargs)

    def authorize_url(self, params: Dict[str, Any] = None, **opts) -> str:
        """Authorization URL for the request phase"""
        params = dict(params or {})
        state = params.pop("state", None)

        # An empty state stops authlib from generating one
        url, _ = self.client(**opts).create_authorization_url(
            self.options(**opts)["authorize_url"], state="", **params
        )

        if state is not None:
            url = add_params_to_uri(url, [("state", state)])
        return url

    async def get_token(
        self,
        params: Dict[str, Any],
        headers: Dict[str, str] = None,
        client_options: Dict[str, Any] = None
    ) -> AccessToken:
        """
        Exchange an authorization code for a token.

        Errors reported by Heroku come back inside the AccessToken. Only a
        failure to reach the token endpoint raises OAuth2Error.
        """
        client_options = client_options or {}
        token_url = self.options(**client_options)["token_url"]
        request_headers = {"Accept": "application/json", **(headers or {})}

        logger.info("Requesting Heroku access token")
        async with self.client(**client_options) as client:
            try:
                token = await client.fetch_token(token_url, headers=request_headers, **params)
            except AuthlibBaseError as e:
                logger.warning(f"Heroku refused the token request: {e.error}")
                return AccessToken.from_response({"error": e.error, "error_description": e.description})
            except httpx.HTTPError as e:
                logger.error(f"Token request to {token_url} failed: {e}")
                raise OAuth2Error(str(e) or e.__class__.__name__) from e
            except ValueError:
                logger.warning("Heroku token response was not JSON")
                return AccessToken.from_response({
                    "error": "invalid_response",
                    "error_description": "Token response was not JSON",
                })

        return AccessToken.from_response(token)

    async def get(self, token: AccessToken, url: str, **opts) -> OAuth2Response:
        """
        Perform an authenticated GET with the given token.

        HTTP error statuses are returned, not raised.
        """
        async with self.client(**opts) as client:
            client.token = token.to_dict()
            try:
                # Explicit auth skips authlib's automatic token refresh
                response = await client.get(
                    url, auth=client.token_auth, headers={"Accept": "application/json"}
                )
            except httpx.HTTPError as e:
                logger.error(f"GET {url} failed: {e}")
                raise OAuth2Error(str(e) or e.__class__.__name__) from e

        try:
            body = response.json()
        except ValueError:
            body = response.text

        return OAuth2Response(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=body,
        )
