from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Heroku OAuth settings
    heroku_client_id: str
    heroku_client_secret: str
    heroku_default_scope: str = "identity"
    heroku_redirect_uri: Optional[str] = None

    # Outbound OAuth requests (token exchange, account fetch)
    oauth_request_timeout: float = 10.0

    # Optional settings
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
