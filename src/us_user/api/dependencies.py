"""FastAPI dependency exposing the shared UserRecordService.

The service is built once in the application lifespan and stored on
app.state; tests replace it through app.dependency_overrides.
"""

from fastapi import Request

from src.us_user.application.service import UserRecordService


def get_user_service(request: Request) -> UserRecordService:
    return request.app.state.user_service
