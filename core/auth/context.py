from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from core.auth.models import AuthError


@dataclass
class AuthContext:
    """
    Per-request authentication state.

    One instance is created for each inbound request and discarded with it.
    Strategies keep provider responses in `private` between the callback and
    the projections, and record failures in `errors`.
    """
    params: Dict[str, str]
    callback_url: str
    private: Dict[str, Any] = field(default_factory=dict)
    errors: List[AuthError] = field(default_factory=list)
    redirect_to: Optional[str] = None

    def put_private(self, key: str, value: Any) -> "AuthContext":
        self.private[key] = value
        return self

    def set_errors(self, errors: List[AuthError]) -> "AuthContext":
        self.errors.extend(errors)
        return self

    def redirect(self, url: str) -> "AuthContext":
        self.redirect_to = url
        return self

    @property
    def failed(self) -> bool:
        return bool(self.errors)
