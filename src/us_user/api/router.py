"""User record REST endpoints.

GET    /users              — all records, store order, never cached
GET    /users/{username}   — single record, read-through cache
POST   /users              — create, cache left cold
PUT    /users/{username}   — update email, invalidates cache
DELETE /users/{username}   — delete, invalidates cache
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.us_common.database import get_db_session
from src.us_common.response import ApiResponse, success_response
from src.us_user.api.dependencies import get_user_service
from src.us_user.application.schemas import CreateUserRequest, UpdateUserRequest
from src.us_user.application.service import UserRecordService

router = APIRouter(prefix="/users", tags=["users"])

ServiceDep = Annotated[UserRecordService, Depends(get_user_service)]
DbDep = Annotated[AsyncSession, Depends(get_db_session)]


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


@router.get("", response_model=ApiResponse, summary="List users")
async def list_users(
    request: Request, service: ServiceDep, db: DbDep
) -> ApiResponse:
    users = await service.list_users(db)
    return success_response(
        [u.model_dump() for u in users], request_id=_get_request_id(request)
    )


@router.get("/{username}", response_model=ApiResponse, summary="Get user")
async def get_user(
    username: str, request: Request, service: ServiceDep, db: DbDep
) -> ApiResponse:
    user = await service.get_user(db, username)
    return success_response(user.model_dump(), request_id=_get_request_id(request))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="Create user",
)
async def create_user(
    body: CreateUserRequest, request: Request, service: ServiceDep, db: DbDep
) -> ApiResponse:
    user = await service.create_user(db, body.username, body.email)
    resp = success_response(user.model_dump(), request_id=_get_request_id(request))
    resp.message = "User created"
    return resp


@router.put("/{username}", response_model=ApiResponse, summary="Update user email")
async def update_user(
    username: str,
    body: UpdateUserRequest,
    request: Request,
    service: ServiceDep,
    db: DbDep,
) -> ApiResponse:
    result = await service.update_user(db, username, body.email)
    return success_response(result.model_dump(), request_id=_get_request_id(request))


@router.delete(
    "/{username}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete user",
)
async def delete_user(username: str, service: ServiceDep, db: DbDep) -> Response:
    await service.delete_user(db, username)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
