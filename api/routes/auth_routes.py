from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from api.dependencies.providers import get_strategy, get_auth_service
from core.auth.context import AuthContext
from core.auth.models import AuthResult, Failure
from core.interfaces.auth_strategy import AuthStrategy
from integrations.oauth2_client import OAuth2Error
from utils.logger import logger

router = APIRouter()


def _build_context(request: Request, provider: str, strategy: AuthStrategy) -> AuthContext:
    """Fresh per-request state for the given provider"""
    callback_url = strategy.option("callback_url")
    if not callback_url:
        callback_url = str(request.url_for("oauth_callback", provider=provider))
    return AuthContext(params=dict(request.query_params), callback_url=callback_url)


@router.get("/auth/{provider}")
async def oauth_request(provider: str, request: Request):
    """
    Redirect the user to the provider's consent page.

    - **provider**: The authentication provider (e.g., "heroku")
    - **scope**: Optional comma-separated scopes, overrides the default
    - **state**: Optional value returned unchanged on the callback
    """
    try:
        strategy = await get_strategy(provider)
        auth_service = await get_auth_service()

        redirect_url = auth_service.request_phase(strategy, _build_context(request, provider, strategy))

        return RedirectResponse(redirect_url, status_code=302)

    except ValueError as e:
        logger.warning(f"Invalid provider requested: {provider}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to start authentication for provider {provider}: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


# Raw provider responses and token secrets stay on the server
CALLBACK_RESPONSE_EXCLUDE = {
    "auth": {
        "extra": True,
        "credentials": {"token": True, "refresh_token": True},
    }
}


@router.get(
    "/auth/{provider}/callback",
    response_model=AuthResult,
    response_model_exclude=CALLBACK_RESPONSE_EXCLUDE
)
async def oauth_callback(provider: str, request: Request):
    """
    Handle the callback from the provider.

    - **provider**: The authentication provider (e.g., "heroku")
    - **code**: Authorization code received from the provider
    - **state**: Optional state parameter
    """
    try:
        strategy = await get_strategy(provider)
    except ValueError as e:
        logger.warning(f"Invalid provider in callback: {provider}")
        raise HTTPException(status_code=400, detail=str(e))

    try:
        auth_service = await get_auth_service()
        result = await auth_service.callback_phase(strategy, provider, _build_context(request, provider, strategy))

    except OAuth2Error as e:
        logger.error(f"Token exchange failed for provider {provider}: {e.reason}")
        raise HTTPException(status_code=502, detail="Authentication provider unreachable")
    except Exception as e:
        logger.error(f"Callback failed for provider {provider}: {e}")
        raise HTTPException(status_code=500, detail="Authentication failed")

    if isinstance(result, Failure):
        body = AuthResult(status="failed", failure=result)
        return JSONResponse(status_code=401, content=body.model_dump(mode="json"))

    return AuthResult(status="authenticated", auth=result)
