from typing import Any, AsyncContextManager, Callable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driven_adapter.model.user_model import UserModel
from src.service.ticketing.driven_adapter.repo.user_mapper import model_to_user


class UserQueryRepoImpl(IUserQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    async def _find_one(self, *criteria: Any) -> Optional[UserEntity]:
        async with self.session_factory() as session:
            user_model = await session.scalar(select(UserModel).where(*criteria).limit(1))
        return model_to_user(user_model) if user_model is not None else None

    @Logger.io
    async def get_by_email(self, email: str) -> Optional[UserEntity]:
        return await self._find_one(UserModel.email == email)

    @Logger.io
    async def get_by_id(self, user_id: int) -> Optional[UserEntity]:
        return await self._find_one(UserModel.id == user_id)

    @Logger.io
    async def exists_by_email(self, email: str) -> bool:
        stmt = select(select(UserModel.id).where(UserModel.email == email).exists())
        async with self.session_factory() as session:
            return bool(await session.scalar(stmt))
