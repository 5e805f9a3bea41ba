from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
from authlib.oauth2.rfc6749 import OAuth2Token


class OAuth2Error(Exception):
    """Transport-level failure talking to an OAuth2 provider"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass
class AccessToken:
    """
    Result of an authorization code exchange.

    A provider that refuses the exchange still produces an AccessToken: its
    access_token is None and the provider's error fields live in other_params.
    """
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    token_type: str = "Bearer"
    other_params: Dict[str, Any] = field(default_factory=dict)

    KNOWN_FIELDS = ("access_token", "refresh_token", "expires_in", "expires_at", "token_type")

    @classmethod
    def from_response(cls, data: Mapping[str, Any]) -> "AccessToken":
        """Build a token from a token endpoint body or an authlib OAuth2Token"""
        token = OAuth2Token.from_dict(dict(data))
        return cls(
            access_token=token.get("access_token"),
            refresh_token=token.get("refresh_token"),
            expires_at=token.get("expires_at"),
            token_type=token.get("token_type") or "Bearer",
            other_params={k: v for k, v in token.items() if k not in cls.KNOWN_FIELDS},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Token in the shape authlib clients expect"""
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "token_type": self.token_type,
        }


@dataclass
class OAuth2Response:
    """Response of an authenticated request, whatever its status"""
    status_code: int
    headers: Dict[str, str]
    body: Any
