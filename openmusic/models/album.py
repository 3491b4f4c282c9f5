from sqlalchemy import Column, ForeignKey, Integer, String, Text
from openmusic.core.database import Base

class Album(Base):
    """앨범 정보.

    Args:
        id (str): `album-` 접두사가 붙은 식별자.
        cover (str | None): 업로드된 커버 이미지의 공개 URL.
    """
    __tablename__ = "albums"

    id = Column(String(50), primary_key=True)
    name = Column(Text, nullable=False)
    year = Column(Integer, nullable=False)
    cover = Column(Text, nullable=True)


class Song(Base):
    __tablename__ = "songs"

    id = Column(String(50), primary_key=True)
    title = Column(Text, nullable=False)
    year = Column(Integer, nullable=False)
    performer = Column(Text, nullable=False)
    genre = Column(Text, nullable=False)
    duration = Column(Integer, nullable=True)
    # 앨범이 삭제되어도 노래는 남고 연결만 끊긴다
    album_id = Column(String(50), ForeignKey("albums.id", ondelete="SET NULL"), nullable=True, index=True)
