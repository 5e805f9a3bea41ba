"""Pytest configuration and fixtures"""

import os

# Required settings must exist before any application module is imported
os.environ.setdefault("HEROKU_CLIENT_ID", "test_client_id")
os.environ.setdefault("HEROKU_CLIENT_SECRET", "test_client_secret")

import httpx
import pytest
from urllib.parse import parse_qsl

from core.auth.context import AuthContext
from providers.heroku.heroku_oauth import HerokuOAuth
from providers.heroku.heroku_strategy import HerokuStrategy


CALLBACK_URL = "http://localhost:8000/auth/heroku/callback"


class HerokuStub:
    """
    Stands in for id.heroku.com and api.heroku.com.

    Each answer is either an httpx.Response or an exception to raise.
    """

    def __init__(self):
        self.token_answer = httpx.Response(200, json={
            "access_token": "heroku_access_token",
            "refresh_token": "heroku_refresh_token",
            "expires_in": 28799,
            "token_type": "Bearer",
            "user_id": "01234567-89ab-cdef-0123-456789abcdef",
            "session_nonce": None,
            "scope": "identity,read",
        })
        self.account_answer = httpx.Response(200, json={
            "email": "a@b.com",
            "name": "A B",
            "id": "01234567-89ab-cdef-0123-456789abcdef",
        })
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "id.heroku.com" and request.url.path == "/oauth/token":
            answer = self.token_answer
        elif request.url.host == "api.heroku.com" and request.url.path == "/account":
            answer = self.account_answer
        else:
            answer = httpx.Response(404, json={"id": "not_found"})

        if isinstance(answer, Exception):
            raise answer
        return answer

    def token_requests(self):
        return [r for r in self.requests if r.url.path == "/oauth/token"]

    def account_requests(self):
        return [r for r in self.requests if r.url.path == "/account"]

    @staticmethod
    def form(request: httpx.Request) -> dict:
        return dict(parse_qsl(request.content.decode()))


@pytest.fixture
def heroku_stub():
    return HerokuStub()


@pytest.fixture
def heroku_oauth(heroku_stub):
    return HerokuOAuth({
        "client_id": "test_client_id",
        "client_secret": "test_client_secret",
        "transport": httpx.MockTransport(heroku_stub),
    })


@pytest.fixture
def strategy(heroku_oauth):
    return HerokuStrategy(oauth=heroku_oauth)


@pytest.fixture
def make_context():
    def _make(**params):
        return AuthContext(params=params, callback_url=CALLBACK_URL)
    return _make
