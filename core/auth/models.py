from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class Credentials(BaseModel):
    """Token details normalized across providers"""
    token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    token_type: Optional[str] = None
    expires: bool = False
    scopes: List[str] = Field(default_factory=list)


class Info(BaseModel):
    """User details normalized across providers"""
    name: Optional[str] = None
    email: Optional[str] = None


class Extra(BaseModel):
    """Raw provider responses, kept as received"""
    raw_info: Dict[str, Any] = Field(default_factory=dict)


class AuthError(BaseModel):
    """A single failure recorded during the callback phase"""
    key: Optional[str] = None
    message: Optional[str] = None


class Auth(BaseModel):
    """Successful authentication result"""
    provider: str
    strategy: str
    uid: Optional[str] = None
    credentials: Credentials
    info: Info
    extra: Extra


class Failure(BaseModel):
    """Failed authentication result"""
    provider: str
    strategy: str
    errors: List[AuthError]


class AuthResult(BaseModel):
    """Response model for the callback endpoint"""
    status: str
    auth: Optional[Auth] = None
    failure: Optional[Failure] = None
