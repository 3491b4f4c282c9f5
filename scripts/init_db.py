import asyncio

from openmusic.core.config import DATABASE_URL
from openmusic.core.database import create_engine, init_models


async def init_db():
    """데이터베이스 테이블을 초기화합니다.

    앱 시작 시에도 create_all이 실행되지만, 배포 전에 스키마만 미리 만들어 둘 때 사용합니다.
    """
    engine = create_engine(DATABASE_URL)
    print(f"Creating tables on {engine.url.render_as_string(hide_password=True)}...")
    try:
        await init_models(engine)
        print("Tables created successfully.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    # NOTE: 루트 디렉토리에서 'python -m scripts.init_db' 명령어로 실행해야 함
    asyncio.run(init_db())
