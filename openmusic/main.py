import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from openmusic.api.albums import router as albums_router
from openmusic.api.collaborations import router as collaborations_router
from openmusic.api.playlists import router as playlists_router
from openmusic.api.songs import router as songs_router
from openmusic.api.users import router as users_router
from openmusic.cache import create_cache
from openmusic.core.config import ALLOWED_ORIGINS, DATABASE_URL, REDIS_URL, UPLOAD_DIR
from openmusic.core.database import create_engine, create_session_factory, init_models
from openmusic.core.limiter import limiter
from openmusic.core.logging_config import setup_logging
from openmusic.core.middleware import AccessLogMiddleware, TraceIDMiddleware
from openmusic.exception.base_exception import BaseCustomException
from openmusic.exception.exception_handler import (
    custom_exception_handler,
    global_exception_handler,
    http_exception_handler,
    rate_limit_exception_handler,
    validation_exception_handler,
)

logger = logging.getLogger("openmusic")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """DB 엔진과 캐시 연결을 앱 수명주기에 묶습니다."""
    engine = create_engine(DATABASE_URL)
    await init_models(engine)
    app.state.session_factory = create_session_factory(engine)
    app.state.cache = create_cache(REDIS_URL)
    logger.info(f"OpenMusic started (cache={type(app.state.cache).__name__})")
    try:
        yield
    finally:
        await app.state.cache.close()
        await engine.dispose()


# 로깅 설정(콘솔 + 일자별 파일 로테이션, JSON 포맷)
setup_logging()

app = FastAPI(title="OpenMusic API", lifespan=lifespan)
app.state.limiter = limiter

# CORS 설정 (환경변수 기반)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Data-Source", "X-Trace-ID"],
)
app.add_middleware(AccessLogMiddleware)
# 가장 바깥에서 Trace ID를 설정해야 이후 로그에 모두 찍힌다
app.add_middleware(TraceIDMiddleware)


@app.get("/ping")
def ping():
    return {"ok": True}


app.include_router(users_router)
app.include_router(albums_router)
app.include_router(songs_router)
app.include_router(playlists_router)
app.include_router(collaborations_router)

Path(UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/albums/covers", StaticFiles(directory=UPLOAD_DIR), name="album-covers")

# 커스텀 예외 핸들러는 라우터 포함 이후에 추가
app.add_exception_handler(BaseCustomException, custom_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)
