"""uc_users REST endpoints.

GET  /users   — whole collection, served from the cache when possible
POST /users   — upsert one user object or an array of them, then invalidate

The POST body is parsed by hand rather than through a FastAPI body model:
unparseable JSON and wrong shapes must end in the same generic write
failure as a database error, not in a 422 with field detail.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request

from src.uc_common.errors import InvalidUserPayloadError
from src.uc_common.redis_client import get_redis
from src.uc_common.response import WriteResponse, write_response
from src.uc_users.application.schemas import normalize_users_payload
from src.uc_users.application.service import UserApplicationService
from src.uc_users.infrastructure.cache import RedisUserCache
from src.uc_users.infrastructure.persistence import UserStore

router = APIRouter(prefix="/users", tags=["users"])

_store = UserStore()


async def get_user_service() -> UserApplicationService:
    """FastAPI dependency: wires the shared DB pool and Redis pool into the service."""
    return UserApplicationService(cache=RedisUserCache(await get_redis()), store=_store)


@router.get("", summary="List all users")
async def list_users(
    service: Annotated[UserApplicationService, Depends(get_user_service)],
) -> list[dict[str, Any]]:
    users = await service.fetch_all()
    return [u.to_dict() for u in users]


@router.post("", summary="Create or update users")
async def write_users(
    request: Request,
    service: Annotated[UserApplicationService, Depends(get_user_service)],
) -> WriteResponse:
    try:
        body = await request.json()
    except (ValueError, RecursionError) as exc:
        # RecursionError: nesting deeper than the JSON decoder can follow.
        raise InvalidUserPayloadError("request body is not valid JSON") from exc

    users = normalize_users_payload(body)
    count = await service.upsert_many(users)
    return write_response(count)
