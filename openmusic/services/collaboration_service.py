import logging
from typing import List

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from openmusic.exception.base_exception import InvariantError
from openmusic.exception.common.playlist_exception import (
    CollaborationAlreadyExistsError, CollaborationNotFoundError,
)
from openmusic.models.playlist import Collaboration
from openmusic.services.aggregate_cache import AggregateCache, user_playlists_key
from openmusic.services.user_service import UserService
from openmusic.utils.ids import new_id

logger = logging.getLogger("openmusic")


class CollaborationService:
    """플레이리스트 협업자 관리.

    협업자의 플레이리스트 목록에는 공유된 플레이리스트가 포함되므로,
    협업 추가/삭제 시 해당 사용자의 목록 캐시를 무효화합니다.
    소유자 권한 확인은 호출 측(PlaylistService.verify_ownership)의 책임입니다.
    """

    def __init__(self, session: AsyncSession, cache: AggregateCache):
        self.session = session
        self.cache = cache
        self.user_service = UserService(session)

    async def _find(self, playlist_id: str, user_id: str):
        result = await self.session.execute(
            select(Collaboration.id).where(
                Collaboration.playlist_id == playlist_id,
                Collaboration.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_collaboration(self, playlist_id: str, user_id: str) -> str:
        await self.user_service.verify_user_exists(user_id)

        if await self._find(playlist_id, user_id):
            raise CollaborationAlreadyExistsError()

        try:
            result = await self.session.execute(
                insert(Collaboration)
                .values(id=new_id("collab"), playlist_id=playlist_id, user_id=user_id)
                .returning(Collaboration.id)
            )
            collaboration_id = result.scalar_one_or_none()
            if not collaboration_id:
                raise InvariantError("협업자를 추가하지 못했습니다.")
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if await self._find(playlist_id, user_id):
                raise CollaborationAlreadyExistsError() from e
            raise

        await self.cache.invalidate(user_playlists_key(user_id))
        logger.info(f"Collaborator added: playlist={playlist_id} user={user_id}")
        return collaboration_id

    async def delete_collaboration(self, playlist_id: str, user_id: str) -> None:
        result = await self.session.execute(
            delete(Collaboration)
            .where(Collaboration.playlist_id == playlist_id, Collaboration.user_id == user_id)
            .returning(Collaboration.id)
        )
        if result.scalar_one_or_none() is None:
            raise CollaborationNotFoundError("협업자를 삭제하지 못했습니다. 협업 정보를 찾을 수 없습니다.")
        await self.session.commit()

        await self.cache.invalidate(user_playlists_key(user_id))
        logger.info(f"Collaborator removed: playlist={playlist_id} user={user_id}")

    async def verify_collaborator(self, playlist_id: str, user_id: str) -> None:
        if not await self._find(playlist_id, user_id):
            raise CollaborationNotFoundError("협업자로 등록되지 않은 사용자입니다.")

    async def get_collaborator_ids(self, playlist_id: str) -> List[str]:
        result = await self.session.execute(
            select(Collaboration.user_id).where(Collaboration.playlist_id == playlist_id)
        )
        return list(result.scalars().all())
