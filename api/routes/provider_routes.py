from fastapi import APIRouter
from api.dependencies.providers import PROVIDER_REGISTRY
from typing import List

router = APIRouter()


@router.get("/providers", response_model=List[str])
async def list_providers():
    """Names accepted as `{provider}` by the /auth routes"""
    return sorted(PROVIDER_REGISTRY)
