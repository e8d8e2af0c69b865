# app/db/session.py
# SQLAlchemy 기본 세팅. 엔진/세션 팩토리는 main.lifespan 에서 만들어서 주입한다.

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def make_engine(database_url: str) -> Engine:
    if not database_url:
        raise RuntimeError("DATABASE_URL 환경변수가 설정되어 있지 않습니다.")

    if database_url.startswith("sqlite"):
        # 로컬/테스트용. 메모리 DB는 커넥션 하나를 공유해야 테이블이 보인다
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url == "sqlite://":
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    return create_engine(
        database_url,
        pool_pre_ping=True,  # 끊어진 커넥션 자동 감지
        pool_size=10,
        max_overflow=0,      # 풀 크기 초과 연결 금지
        pool_timeout=30,     # 풀 고갈 시 대기 시간(초) 후 Timeout
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
