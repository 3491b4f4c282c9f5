from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _current_year() -> int:
    return datetime.now().year


# Request DTO
class AlbumPayload(BaseModel):
    """앨범 생성/수정 요청"""
    name: str = Field(..., min_length=1, description="Album name")
    year: int = Field(..., ge=1900, description="Release year (1900 ~ current year)")

    @field_validator("year")
    @classmethod
    def year_not_in_future(cls, v: int) -> int:
        if v > _current_year():
            raise ValueError(f"year must be less than or equal to {_current_year()}")
        return v


class SongPayload(BaseModel):
    title: str = Field(..., min_length=1)
    year: int = Field(..., ge=1900)
    performer: str = Field(..., min_length=1)
    genre: str = Field(..., min_length=1)
    duration: Optional[int] = Field(None, ge=0, description="Duration in seconds")
    albumId: Optional[str] = Field(None, description="Album this song belongs to")


class UserPayload(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    fullname: str = Field(..., min_length=1)


class PlaylistPayload(BaseModel):
    name: str = Field(..., min_length=1)


class PlaylistSongPayload(BaseModel):
    songId: str = Field(..., min_length=1)


class CollaborationPayload(BaseModel):
    playlistId: str = Field(..., min_length=1)
    userId: str = Field(..., min_length=1)


# Response DTO
class SongSummary(BaseModel):
    id: str
    title: str
    performer: str


class SongDetail(SongSummary):
    year: int
    genre: str
    duration: Optional[int] = None
    albumId: Optional[str] = None


class AlbumDetail(BaseModel):
    """앨범 상세 (수록곡 포함)"""
    id: str
    name: str
    year: int
    coverUrl: Optional[str] = None
    songs: List[SongSummary] = Field(default_factory=list)


class PlaylistSummary(BaseModel):
    """플레이리스트 목록 항목 (캐시에 JSON으로 저장됨)"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    username: str


class PlaylistDetail(BaseModel):
    id: str
    name: str
    username: str
    songs: List[SongSummary] = Field(default_factory=list)


class Activity(BaseModel):
    username: str
    title: str
    action: str
    time: str


class PlaylistActivities(BaseModel):
    playlistId: str
    activities: List[Activity] = Field(default_factory=list)
