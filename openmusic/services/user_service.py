import logging

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.exception.base_exception import InvariantError
from openmusic.exception.common.user_exception import UserNotFoundError, UsernameTakenError
from openmusic.models.user import User
from openmusic.utils.ids import new_id

logger = logging.getLogger("openmusic")


class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_user(self, username: str, fullname: str) -> str:
        existing = await self.session.execute(select(User.id).where(User.username == username))
        if existing.first() is not None:
            raise UsernameTakenError()

        try:
            result = await self.session.execute(
                insert(User)
                .values(id=new_id("user"), username=username, fullname=fullname)
                .returning(User.id)
            )
            user_id = result.scalar_one_or_none()
            if not user_id:
                raise InvariantError("사용자를 추가하지 못했습니다.")
            await self.session.commit()
        except IntegrityError as e:
            # 동시 가입 경합: 유니크 제약이 최종 방어선
            await self.session.rollback()
            raise UsernameTakenError() from e

        logger.info(f"User registered: {user_id}")
        return user_id

    async def get_user(self, user_id: str) -> dict:
        result = await self.session.execute(
            select(User.id, User.username, User.fullname).where(User.id == user_id)
        )
        row = result.mappings().first()
        if row is None:
            raise UserNotFoundError()
        return dict(row)

    async def verify_user_exists(self, user_id: str) -> None:
        result = await self.session.execute(select(User.id).where(User.id == user_id))
        if result.first() is None:
            raise UserNotFoundError()
