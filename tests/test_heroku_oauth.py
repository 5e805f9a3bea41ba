"""Unit tests for the Heroku OAuth client factory"""

import httpx
import pytest
from urllib.parse import parse_qs, urlparse
from authlib.integrations.httpx_client import AsyncOAuth2Client

from integrations.oauth2_client import AccessToken, OAuth2Error
from providers.heroku.heroku_oauth import HerokuOAuth


def authorize_query(url: str) -> dict:
    return parse_qs(urlparse(url).query, keep_blank_values=True)


class TestClientFactory:
    """Tests for HerokuOAuth.client and HerokuOAuth.options"""

    def test_defaults(self):
        oauth = HerokuOAuth({"client_id": "cid", "client_secret": "secret"})

        opts = oauth.options()
        client = oauth.client()

        assert opts["authorize_url"] == "https://id.heroku.com/oauth/authorize"
        assert opts["token_url"] == "https://id.heroku.com/oauth/token"
        assert isinstance(client, AsyncOAuth2Client)
        assert client.client_id == "cid"
        assert client.client_secret == "secret"

    def test_overrides_win_over_config(self):
        oauth = HerokuOAuth({
            "client_id": "cid",
            "client_secret": "secret",
            "redirect_uri": "https://config.example.com/callback",
        })

        client = oauth.client(redirect_uri="https://override.example.com/callback", client_id="other")

        assert client.redirect_uri == "https://override.example.com/callback"
        assert client.client_id == "other"
        assert client.client_secret == "secret"

    def test_config_wins_over_defaults(self):
        oauth = HerokuOAuth({
            "client_id": "cid",
            "client_secret": "secret",
            "token_url": "https://id.example.com/token",
        })

        assert oauth.options()["token_url"] == "https://id.example.com/token"

    @pytest.mark.parametrize("key", ["client_id", "client_secret"])
    def test_malformed_credentials_raise(self, key):
        config = {"client_id": "cid", "client_secret": "secret"}
        config[key] = 12345

        with pytest.raises(ValueError) as exc_info:
            HerokuOAuth(config).client()

        assert key in str(exc_info.value)


class TestAuthorizeUrl:
    """Tests for HerokuOAuth.authorize_url"""

    def setup_method(self):
        self.oauth = HerokuOAuth({"client_id": "cid", "client_secret": "secret"})

    def test_builds_heroku_url(self):
        url = self.oauth.authorize_url({"redirect_uri": "https://app.example.com/cb", "scope": "identity"})

        parsed = urlparse(url)
        query = authorize_query(url)
        assert parsed.netloc == "id.heroku.com"
        assert parsed.path == "/oauth/authorize"
        assert query["client_id"] == ["cid"]
        assert query["response_type"] == ["code"]
        assert query["redirect_uri"] == ["https://app.example.com/cb"]
        assert query["scope"] == ["identity"]

    def test_no_generated_state(self):
        url = self.oauth.authorize_url({"scope": "identity"})

        assert "state" not in authorize_query(url)

    def test_state_passed_through(self):
        assert authorize_query(self.oauth.authorize_url({"state": "xyz"}))["state"] == ["xyz"]

    def test_empty_state_passed_through(self):
        assert authorize_query(self.oauth.authorize_url({"state": ""}))["state"] == [""]


class TestGetToken:
    """Tests for HerokuOAuth.get_token"""

    @pytest.mark.asyncio
    async def test_authorization_code_grant(self, heroku_oauth, heroku_stub):
        token = await heroku_oauth.get_token({"code": "abc", "redirect_uri": "https://app.example.com/cb"})

        request = heroku_stub.token_requests()[0]
        form = heroku_stub.form(request)
        assert request.method == "POST"
        assert str(request.url) == "https://id.heroku.com/oauth/token"
        assert request.headers["accept"] == "application/json"
        assert form["grant_type"] == "authorization_code"
        assert form["code"] == "abc"
        assert form["redirect_uri"] == "https://app.example.com/cb"
        assert form["client_id"] == "test_client_id"
        assert form["client_secret"] == "test_client_secret"

        assert token.access_token == "heroku_access_token"
        assert token.refresh_token == "heroku_refresh_token"
        assert token.expires_at is not None
        assert token.other_params["scope"] == "identity,read"

    @pytest.mark.asyncio
    async def test_provider_error_is_returned_not_raised(self, heroku_oauth, heroku_stub):
        heroku_stub.token_answer = httpx.Response(
            400, json={"error": "invalid_grant", "error_description": "bad code"}
        )

        token = await heroku_oauth.get_token({"code": "abc"})

        assert token.access_token is None
        assert token.other_params["error"] == "invalid_grant"
        assert token.other_params["error_description"] == "bad code"

    @pytest.mark.asyncio
    async def test_non_json_body_is_returned_as_error(self, heroku_oauth, heroku_stub):
        heroku_stub.token_answer = httpx.Response(400, text="Bad Request")

        token = await heroku_oauth.get_token({"code": "abc"})

        assert token.access_token is None
        assert token.other_params["error"] == "invalid_response"

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, heroku_oauth, heroku_stub):
        heroku_stub.token_answer = httpx.ConnectError("connection refused")

        with pytest.raises(OAuth2Error) as exc_info:
            await heroku_oauth.get_token({"code": "abc"})

        assert "connection refused" in exc_info.value.reason


class TestAuthenticatedGet:
    """Tests for HerokuOAuth.get"""

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self, heroku_oauth, heroku_stub):
        token = AccessToken(access_token="abc")

        response = await heroku_oauth.get(token, "https://api.heroku.com/account")

        request = heroku_stub.account_requests()[0]
        assert request.headers["authorization"] == "Bearer abc"
        assert request.headers["accept"] == "application/json"
        assert response.status_code == 200
        assert response.body["email"] == "a@b.com"

    @pytest.mark.asyncio
    async def test_error_status_is_returned(self, heroku_oauth, heroku_stub):
        heroku_stub.account_answer = httpx.Response(401, text="Unauthorized")

        response = await heroku_oauth.get(AccessToken(access_token="abc"), "https://api.heroku.com/account")

        assert response.status_code == 401
        assert response.body == "Unauthorized"

    @pytest.mark.asyncio
    async def test_transport_error_raises(self, heroku_oauth, heroku_stub):
        heroku_stub.account_answer = httpx.ReadTimeout("timed out")

        with pytest.raises(OAuth2Error) as exc_info:
            await heroku_oauth.get(AccessToken(access_token="abc"), "https://api.heroku.com/account")

        assert exc_info.value.reason == "timed out"
