from abc import ABC, abstractmethod

from src.service.ticketing.domain.entity.user_entity import UserEntity


class IUserCommandRepo(ABC):
    """Write side of the user store"""

    @abstractmethod
    async def create(self, user_entity: UserEntity) -> UserEntity:
        """Raises ConflictError when the email is already taken"""
