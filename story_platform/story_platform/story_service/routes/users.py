"""
User routes - registration, login, profiles and username search.
"""
from typing import List

from fastapi import APIRouter, Depends, Request

from ..auth import AuthService
from ..dependencies import get_auth_service, get_current_user_id, get_user_service
from ..errors import Forbidden, InvalidCredentials, UserNotFound
from ..schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    PublicProfile,
    RegisterRequest,
    UserOut,
    UserUpdate,
)
from ..users import UserService
from ..utils.event_logger import log_auth_event

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register", response_model=UserOut)
def register(
    payload: RegisterRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
):
    credential = service.register(payload)
    log_auth_event("register", credential.id, credential.email, request)
    # UserOut has no password_hash field, so the hash never leaves the service
    return UserOut.model_validate(credential, from_attributes=True)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    request: Request,
    service: AuthService = Depends(get_auth_service),
):
    identifier = payload.email if payload.email is not None else payload.username
    try:
        credential, token = service.login(payload)
    except (UserNotFound, InvalidCredentials):
        log_auth_event("login_failure", None, identifier, request)
        raise

    log_auth_event("login_success", credential.id, identifier, request)
    return LoginResponse(user=UserOut.model_validate(credential, from_attributes=True), token=token)


@router.get("/search/{username}", response_model=List[PublicProfile])
def search_users(username: str, service: UserService = Depends(get_user_service)):
    return service.search(username)


@router.get("/{user_id}", response_model=PublicProfile)
def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    return service.get_profile(user_id)


@router.put("/{user_id}", response_model=MessageResponse)
def update_user(
    user_id: str,
    payload: UserUpdate,
    current_user_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
):
    if current_user_id != user_id:
        raise Forbidden()
    service.update_profile(user_id, payload)
    return MessageResponse(message="Updated user successfully.")


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    request: Request,
    current_user_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
):
    if current_user_id != user_id:
        raise Forbidden("Not allowed to delete another user.")
    service.delete_user(user_id)
    log_auth_event("user_deleted", user_id, None, request)
    return MessageResponse(message="Removed user successfully.")
