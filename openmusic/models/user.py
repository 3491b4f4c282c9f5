from sqlalchemy import Column, String, Text
from openmusic.core.database import Base

class User(Base):
    """플레이리스트 소유자, 협업자, 좋아요 주체가 되는 사용자."""
    __tablename__ = "users"

    id = Column(String(50), primary_key=True)
    username = Column(String(50), nullable=False, unique=True)
    fullname = Column(Text, nullable=False)
