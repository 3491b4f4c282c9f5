from sqlalchemy import Column, ForeignKey, String, Text, UniqueConstraint
from openmusic.core.database import Base

class Playlist(Base):
    __tablename__ = "playlists"

    id = Column(String(50), primary_key=True)
    name = Column(Text, nullable=False)
    owner = Column(String(50), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)


class PlaylistSong(Base):
    __tablename__ = "playlist_songs"

    id = Column(String(50), primary_key=True)
    playlist_id = Column(String(50), ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False, index=True)
    song_id = Column(String(50), ForeignKey("songs.id", ondelete="CASCADE"), nullable=False)


class Collaboration(Base):
    """소유자가 아닌 사용자에게 플레이리스트 수정 권한을 부여한다."""
    __tablename__ = "collaborations"
    __table_args__ = (
        UniqueConstraint("playlist_id", "user_id", name="uq_playlist_collaborator"),
    )

    id = Column(String(50), primary_key=True)
    playlist_id = Column(String(50), ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(50), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)


class PlaylistSongActivity(Base):
    """플레이리스트 노래 추가/삭제 이력.

    노래나 사용자가 나중에 삭제되어도 이력이 남도록 id 대신 제목과 username을 저장한다.
    """
    __tablename__ = "playlist_song_activities"

    id = Column(String(50), primary_key=True)
    playlist_id = Column(String(50), ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False, index=True)
    song_title = Column(Text, nullable=False)
    username = Column(Text, nullable=False)
    action = Column(String(10), nullable=False)
    time = Column(String(40), nullable=False)
