# app/main.py

# ------------------------
# 환경 변수 로드
# ------------------------
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

# ------------------------
# FastAPI, CORS 미들웨어 import
# ------------------------
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, settings as default_settings
from app.logging_config import setup_logging
from app.routers import users_sync as users_sync_router
from app.services.profile_service import ProfileSyncService
from app.services.profile_store import ProfileStore

logger = logging.getLogger(__name__)


# ------------------------
# 저장소 생성 (클라이언트/엔진 수명은 앱 프로세스가 가진다)
# ------------------------
def build_store(cfg: Settings) -> ProfileStore:
    if cfg.profile_store == "sql":
        from app.db.session import Base, make_engine, make_session_factory
        from app.services.sql_store import SqlProfileStore  # UserProfile 테이블 등록 포함

        engine = make_engine(cfg.database_url)
        Base.metadata.create_all(engine)
        logger.info("[BOOT] profile store=sql url=%s", engine.url.render_as_string(hide_password=True))
        return SqlProfileStore(make_session_factory(engine))

    from app.services.supabase_store import SupabaseProfileStore, create_supabase_client

    client = create_supabase_client(cfg.supabase_url, cfg.supabase_service_role_key)
    logger.info("[BOOT] profile store=supabase table=%s", cfg.supabase_users_table)
    return SupabaseProfileStore(client, table=cfg.supabase_users_table)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 테스트처럼 store 를 주입한 경우에는 그대로 사용
    if getattr(app.state, "profile_service", None) is None:
        app.state.profile_service = ProfileSyncService(build_store(app.state.settings))
    yield


# ------------------------
# 1) FastAPI 앱 생성
# ------------------------
def create_app(cfg: Settings | None = None, store: ProfileStore | None = None) -> FastAPI:
    cfg = cfg or default_settings
    setup_logging(cfg.log_level)

    # 토큰 검증을 켰는데 secret 이 없으면 모든 요청이 실패하므로 기동 시점에 막는다
    if cfg.require_auth and not cfg.supabase_jwt_secret:
        raise RuntimeError("REQUIRE_AUTH=true 이면 SUPABASE_JWT_SECRET 이 필요합니다.")

    app = FastAPI(title="Profile Sync API", lifespan=lifespan)
    app.state.settings = cfg
    app.state.profile_service = ProfileSyncService(store) if store is not None else None

    # ------------------------
    # 2) CORS 미들웨어 추가
    #    - 기본값 "*" 는 개발용
    # ------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origin_list or ["*"],
        allow_credentials=False,  # 쿠키 안 쓰면 False
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ------------------------
    # 3) 라우터 등록
    # ------------------------
    app.include_router(users_sync_router.router)

    # ------------------------
    # 4) Root 엔드포인트 (health check)
    # ------------------------
    @app.get("/")
    def root():
        return {"ok": True}

    return app


app = create_app()
