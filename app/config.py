# app/config.py


from dotenv import load_dotenv
from pathlib import Path
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()  # .env 파일 먼저 읽기

BASE_DIR = Path(__file__).resolve().parent.parent  # 레포 루트

class Settings(BaseSettings):
    # 환경 구분
    app_env: str = "local"
    log_level: str = "INFO"

    # 프로필 저장소 선택: supabase(운영) | sql(로컬/테스트)
    profile_store: Literal["supabase", "sql"] = "supabase"

    # Supabase
    supabase_url: str | None = None                # SUPABASE_URL
    supabase_service_role_key: str | None = None   # SUPABASE_SERVICE_ROLE_KEY (RLS 우회용)
    supabase_users_table: str = "users"            # public.users

    # SQL 저장소 (profile_store=sql 일 때만 사용)
    database_url: str = "sqlite:///./profiles.db"  # DATABASE_URL

    # Supabase access token 검증
    supabase_jwt_secret: str | None = None
    supabase_issuer: str | None = None              # SUPABASE_ISSUER
    supabase_jwt_audience: str = "authenticated"    # SUPABASE_JWT_AUDIENCE
    require_auth: bool = False                      # True면 쓰기 API에 Bearer 토큰 필수

    # CORS (콤마 구분)
    cors_origins: str = "*"

    # pydantic-settings v2 스타일
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),  # 루트 .env 절대경로
        env_file_encoding="utf-8",
        extra="ignore",                   # 필요 없는 env 무시
    )

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

settings = Settings()

if __name__ == "__main__":
    print("BASE_DIR:", BASE_DIR)
    print("PROFILE_STORE:", settings.profile_store)
    print("SUPABASE_URL:", settings.supabase_url)
    if settings.supabase_service_role_key:
        print("SUPABASE_SERVICE_ROLE_KEY 앞 10글자:", settings.supabase_service_role_key[:10], "...")
