from pydantic import BaseModel, ConfigDict, EmailStr, Field, SecretStr

from src.service.ticketing.domain.entity.user_entity import UserEntity, UserRole


class CreateUserRequest(BaseModel):
    email: EmailStr
    password: SecretStr = Field(..., min_length=8)
    role: UserRole = UserRole.BUYER

    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'email': 'organizer@test.com',
                'password': 'P@ssw0rd',
                'role': 'organizer',
            }
        }
    )


class LoginRequest(BaseModel):
    email: EmailStr
    password: SecretStr


class UserResponse(BaseModel):
    id: int
    email: str
    role: UserRole
    is_active: bool

    @classmethod
    def from_entity(cls, user: UserEntity) -> 'UserResponse':
        return cls(id=user.id or 0, email=user.email, role=user.role, is_active=user.is_active)


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
