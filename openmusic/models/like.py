from sqlalchemy import Column, ForeignKey, String, UniqueConstraint
from openmusic.core.database import Base

class AlbumLike(Base):
    """사용자의 앨범 좋아요 기록.

    애플리케이션의 중복 검사는 빠른 경로일 뿐이며, 동시 요청 경합은
    (user_id, album_id) 유니크 제약이 최종적으로 막는다.
    """
    __tablename__ = "user_album_likes"
    __table_args__ = (
        UniqueConstraint("user_id", "album_id", name="uq_user_album_like"),
    )

    id = Column(String(50), primary_key=True)
    user_id = Column(String(50), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    album_id = Column(String(50), ForeignKey("albums.id", ondelete="CASCADE"), nullable=False, index=True)
