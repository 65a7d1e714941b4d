from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Cookie, Depends, Header, Response, status

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.user_use_case import UserUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import (
    AUTH_COOKIE_NAME,
    JwtAuth,
    extract_token,
)
from src.service.ticketing.driving_adapter.http_controller.schema.user_schema import (
    AuthResponse,
    CreateUserRequest,
    LoginRequest,
    UserResponse,
)


router = APIRouter()


@inject
async def get_current_user(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    token: Optional[str] = Cookie(None, alias=AUTH_COOKIE_NAME),
    authorization: Optional[str] = Header(None),
) -> UserEntity:
    """Current user from the JWT (stateless, no DB query)"""
    return jwt_auth.get_current_user_info_from_jwt(
        extract_token(cookie_token=token, authorization=authorization)
    )


def _set_auth_cookie(response: Response, *, token: str, max_age: int) -> None:
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        max_age=max_age,
        httponly=True,
        samesite='lax',
        secure=False,  # Set to True behind TLS
    )


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
@inject
async def create_user(
    request: CreateUserRequest,
    response: Response,
    use_case: UserUseCase = Depends(UserUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> AuthResponse:
    user_entity = await use_case.create_user(
        email=request.email,
        password=request.password.get_secret_value(),
        role=request.role.value,
    )
    token = jwt_auth.create_jwt_token(user_entity)
    _set_auth_cookie(response, token=token, max_age=int(jwt_auth.token_expire.total_seconds()))
    return AuthResponse(user=UserResponse.from_entity(user_entity), token=token)


@router.post('/login')
@Logger.io
@inject
async def login(
    request: LoginRequest,
    response: Response,
    use_case: UserUseCase = Depends(UserUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> AuthResponse:
    user_entity = await use_case.authenticate(
        email=request.email, password=request.password.get_secret_value()
    )
    token = jwt_auth.create_jwt_token(user_entity)
    _set_auth_cookie(response, token=token, max_age=int(jwt_auth.token_expire.total_seconds()))
    return AuthResponse(user=UserResponse.from_entity(user_entity), token=token)


@router.get('')
@Logger.io
async def get_me(current_user: UserEntity = Depends(get_current_user)) -> UserResponse:
    return UserResponse.from_entity(current_user)
