# scripts/check_connection.py
"""
외부 의존 서비스 연결 상태 확인 스크립트 (Health Check)
1. 데이터베이스 연결
2. Redis 캐시 연결 (REDIS_URL 미설정 시 건너뜀)

실행: python -m scripts.check_connection
"""
import asyncio
import sys

from sqlalchemy import text

from openmusic.cache import RedisCache
from openmusic.core.config import DATABASE_URL, REDIS_URL
from openmusic.core.database import create_engine


async def check_database() -> bool:
    print("\n[1/2] Checking database connection...")
    engine = create_engine(DATABASE_URL)
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        print("✅ Database connected!")
        return True
    except Exception as e:
        print(f"❌ Database connection failed: {e}")
        return False
    finally:
        await engine.dispose()


async def check_redis() -> bool:
    print("\n[2/2] Checking Redis connection...")
    if not REDIS_URL:
        print("⚠️ REDIS_URL is not set. In-memory cache will be used.")
        return True

    cache = RedisCache.from_url(REDIS_URL)
    try:
        if await cache.ping():
            print("✅ Redis connected!")
            return True
        print("❌ Redis connection failed.")
        return False
    finally:
        await cache.close()


async def main() -> int:
    results = [await check_database(), await check_redis()]
    return 0 if all(results) else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
