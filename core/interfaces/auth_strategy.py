from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from core.auth.context import AuthContext
from core.auth.models import AuthError, Credentials, Info, Extra


class AuthStrategy(ABC):
    """
    Abstract authentication strategy.

    A strategy drives one provider through the request phase (redirect to the
    provider) and the callback phase (turn the provider's answer into either
    stored state or recorded errors). The projections read that stored state
    afterwards and must not perform I/O.
    """

    name: str = "strategy"
    default_options: Dict[str, Any] = {}

    def __init__(self, **options):
        self.options = options

    def option(self, key: str) -> Any:
        """Configured option, falling back to the strategy default"""
        return self.options.get(key, self.default_options.get(key))

    @staticmethod
    def error(key: Optional[str], message: Optional[str]) -> AuthError:
        return AuthError(key=key, message=message)

    @abstractmethod
    def handle_request(self, ctx: AuthContext) -> AuthContext:
        """Redirect the user to the provider"""
        pass

    @abstractmethod
    async def handle_callback(self, ctx: AuthContext) -> AuthContext:
        """Process the provider's callback"""
        pass

    def handle_cleanup(self, ctx: AuthContext) -> AuthContext:
        """Drop provider data stored during the callback"""
        return ctx

    @abstractmethod
    def uid(self, ctx: AuthContext) -> Optional[str]:
        """Unique identifier of the user at the provider"""
        pass

    def credentials(self, ctx: AuthContext) -> Credentials:
        return Credentials()

    def info(self, ctx: AuthContext) -> Info:
        return Info()

    def extra(self, ctx: AuthContext) -> Extra:
        return Extra()
