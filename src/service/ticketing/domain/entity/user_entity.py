from datetime import datetime
from enum import Enum
from typing import Optional

import attrs
from pydantic import SecretStr

from src.platform.exception.exceptions import DomainError, ForbiddenError
from src.service.ticketing.app.interface.i_password_hasher import IPasswordHasher


class UserRole(str, Enum):
    BUYER = 'buyer'
    ORGANIZER = 'organizer'


@attrs.define
class UserEntity:
    email: str = ''
    hashed_password: str = attrs.field(default='', repr=False)  # Hide from repr
    id: Optional[int] = None
    role: UserRole = UserRole.BUYER
    is_active: bool = True
    created_at: Optional[datetime] = None

    def validate_for_authentication(self) -> None:
        if not self.is_active:
            raise ForbiddenError('User is inactive')

    @staticmethod
    def validate_role(role: str) -> UserRole:
        valid_roles = [r.value for r in UserRole]
        if role not in valid_roles:
            raise DomainError(f'Invalid role: {role}. Must be one of: {", ".join(valid_roles)}')
        return UserRole(role)

    def set_password(self, plain_password: str, password_hasher: IPasswordHasher) -> None:
        self.hashed_password = password_hasher.hash_password(
            plain_password=SecretStr(plain_password)
        )

    def verify_password(self, plain_password: str, password_hasher: IPasswordHasher) -> bool:
        return password_hasher.verify_password(
            plain_password=SecretStr(plain_password), hashed_password=self.hashed_password
        )
