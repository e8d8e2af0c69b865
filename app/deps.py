# app/deps.py
import logging

from fastapi import Header, HTTPException, Request

from app.config import Settings
from app.services.profile_service import ProfileSyncService
from app.services.supa_auth import verify_bearer

logger = logging.getLogger(__name__)

# ----------------------------
# 앱 상태 (main.lifespan 에서 생성한 객체)
# ----------------------------
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_profile_service(request: Request) -> ProfileSyncService:
    return request.app.state.profile_service

# ----------------------------
# 현재 사용자 (require_auth 일 때만 검사)
# ----------------------------
def get_current_claims(
    request: Request,
    authorization: str | None = Header(None),
) -> dict | None:
    """
    require_auth=False 면 None (서버 간 호출 / 로컬 개발)
    require_auth=True 면 Supabase access token 검증 후 {"user_id", "email"}
    """
    cfg: Settings = request.app.state.settings
    if not cfg.require_auth:
        return None

    try:
        return verify_bearer(
            authorization,
            cfg.supabase_jwt_secret,
            audience=cfg.supabase_jwt_audience,
            issuer=cfg.supabase_issuer,
        )
    except ValueError as e:
        logger.info("[AUTH] rejected: %s", e)
        raise HTTPException(status_code=401, detail={"message": "unauthorized", "detail": str(e)})


def ensure_same_user(claims: dict | None, user_id: str | None) -> None:
    # 토큰 주인과 요청 대상이 다르면 403
    if claims is None:
        return
    if user_id and str(claims["user_id"]) != str(user_id):
        raise HTTPException(
            status_code=403,
            detail={"message": "forbidden", "detail": "User not authorized to access this resource"},
        )
