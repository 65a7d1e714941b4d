"""
Stateless JWT authentication.

The token carries the caller's id, email, role and active flag, so a request
is authenticated without touching the database. Clients send it either in
the auth cookie set at login or as `Authorization: Bearer <token>`.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, NoReturn, Optional

from fastapi import HTTPException, status
import jwt

from src.platform.config.core_setting import settings
from src.service.ticketing.domain.entity.user_entity import UserEntity, UserRole


AUTH_COOKIE_NAME = 'fastapiusersauth'


def _unauthorized(detail: str = 'Invalid token') -> NoReturn:
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    def create_jwt_token(self, user_entity: UserEntity) -> str:
        issued_at = datetime.now(timezone.utc)
        claims = {
            'sub': str(user_entity.id),
            'iat': issued_at,
            'exp': issued_at + self.token_expire,
            'user_id': user_entity.id,
            'email': user_entity.email,
            'role': user_entity.role.value,
            'is_active': user_entity.is_active,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError:
            _unauthorized()

    def get_current_user_info_from_jwt(self, token: Optional[str]) -> UserEntity:
        if not token:
            _unauthorized('Not authenticated')

        claims = self.decode_jwt_token(token)
        user_id, email = claims.get('user_id'), claims.get('email')
        is_active = claims.get('is_active')
        if not isinstance(user_id, int) or not email or not isinstance(is_active, bool):
            _unauthorized()
        if claims.get('role') not in {role.value for role in UserRole}:
            _unauthorized()

        if not is_active:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='User is inactive')
        return UserEntity(id=user_id, email=email, role=UserRole(claims['role']), is_active=True)


def extract_token(*, cookie_token: Optional[str], authorization: Optional[str]) -> Optional[str]:
    """Cookie first, then the bearer header"""
    if cookie_token:
        return cookie_token

    scheme, _, credentials = (authorization or '').partition(' ')
    if scheme.lower() != 'bearer':
        return None
    return credentials.strip() or None
