from core.interfaces.auth_strategy import AuthStrategy
from core.auth.auth_service import AuthService
from providers.heroku.heroku_oauth import HerokuOAuth
from providers.heroku.heroku_strategy import HerokuStrategy
from config import Settings, settings
from typing import Dict, Optional


def build_provider_registry(app_settings: Settings) -> Dict[str, AuthStrategy]:
    """Build strategies from explicit settings"""
    heroku_oauth = HerokuOAuth({
        "client_id": app_settings.heroku_client_id,
        "client_secret": app_settings.heroku_client_secret,
        "redirect_uri": app_settings.heroku_redirect_uri,
        "timeout": app_settings.oauth_request_timeout,
    })

    return {
        "heroku": HerokuStrategy(
            oauth=heroku_oauth,
            default_scope=app_settings.heroku_default_scope,
            callback_url=app_settings.heroku_redirect_uri
        )
    }


# Provider registry - maps provider names to strategy instances
PROVIDER_REGISTRY: Dict[str, AuthStrategy] = build_provider_registry(settings)

# Service instance - initialized lazily
_auth_service: Optional[AuthService] = None


async def get_strategy(provider_name: str) -> AuthStrategy:
    """Get authentication strategy by provider name"""
    if provider_name not in PROVIDER_REGISTRY:
        raise ValueError(f"Unsupported provider: {provider_name}")
    return PROVIDER_REGISTRY[provider_name]


async def get_auth_service() -> AuthService:
    """Get auth service instance"""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
