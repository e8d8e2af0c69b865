# app/routers/users_sync.py
# public.users 동기화 API
# - POST /api/users/sync            : 로그인/회원가입 시 IdP 메타데이터로 동기화
# - PUT  /api/users/sync            : 사용자 직접 수정 (이름, 프로필 사진, 이메일 인증)
# - POST /api/users/sync/auth-event : Supabase auth 이벤트 + user 객체 그대로 전달
# - GET  /api/users/{user_id}       : 프로필 조회
import logging

from fastapi import APIRouter, Depends, HTTPException

from app.deps import ensure_same_user, get_current_claims, get_profile_service
from app.schemas.profile import AuthStateEvent, IdentityEvent, UserEditEvent, UserResponse
from app.services.errors import InvalidInput, NotFound, ProfileConflict, ProfileError
from app.services.profile_service import ProfileSyncService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])

_STATUS_BY_ERROR = {
    InvalidInput: 400,
    NotFound: 404,
    ProfileConflict: 409,
}


def _raise_http(e: ProfileError):
    status = _STATUS_BY_ERROR.get(type(e), 500)
    if status == 500:
        logger.error("[USERS_SYNC] %s: %s", e.message, e.detail)
    raise HTTPException(status_code=status, detail={"message": e.message, "detail": e.detail})


@router.post("/sync", response_model=UserResponse)
def sync_user(
    payload: IdentityEvent,
    claims=Depends(get_current_claims),
    svc: ProfileSyncService = Depends(get_profile_service),
):
    """
    로그인 직후 IdP 메타데이터로 프로필 동기화
    - 신규면 생성, 기존이면 이름/사진은 비어 있을 때만 채움
    """
    ensure_same_user(claims, payload.user_id)
    try:
        user = svc.sync_identity(payload)
    except ProfileError as e:
        _raise_http(e)
    return UserResponse(user=user)


@router.put("/sync", response_model=UserResponse)
def edit_user(
    payload: UserEditEvent,
    claims=Depends(get_current_claims),
    svc: ProfileSyncService = Depends(get_profile_service),
):
    """
    사용자 직접 수정
    - 보낸 필드는 그대로 반영 (null 이면 지우기)
    """
    ensure_same_user(claims, payload.user_id)
    try:
        user = svc.apply_user_edit(payload)
    except ProfileError as e:
        _raise_http(e)
    return UserResponse(user=user)


@router.post("/sync/auth-event", response_model=UserResponse)
def sync_auth_event(
    payload: AuthStateEvent,
    claims=Depends(get_current_claims),
    svc: ProfileSyncService = Depends(get_profile_service),
):
    ensure_same_user(claims, payload.user.get("id"))
    try:
        user = svc.handle_auth_event(payload.event, payload.user)
    except ProfileError as e:
        _raise_http(e)
    if user is None:
        return UserResponse(user=None, skipped=True)
    return UserResponse(user=user)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    claims=Depends(get_current_claims),
    svc: ProfileSyncService = Depends(get_profile_service),
):
    ensure_same_user(claims, user_id)
    try:
        user = svc.get_profile(user_id)
    except ProfileError as e:
        _raise_http(e)
    return UserResponse(user=user)
