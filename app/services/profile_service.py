"""
프로필 동기화 비즈니스 로직
- 현재 행 조회 -> reconciler 로 변경분 계산 -> 저장소에 한 번에 반영
- 로그인 이벤트 처리 (메타데이터 추출 + 이메일 인증 상태 반영)
"""
import logging
from typing import Any, Dict, Optional

from app.schemas.profile import IdentityEvent, ProfileRecord, UserEditEvent
from app.services import identity
from app.services.errors import InvalidInput, NotFound, ProfileConflict
from app.services.profile_reconciler import reconcile_identity_sync, reconcile_user_edit
from app.services.profile_store import ProfileStore

logger = logging.getLogger(__name__)


class ProfileSyncService:
    """public.users 동기화"""

    def __init__(self, store: ProfileStore):
        self.store = store

    def sync_identity(self, event: IdentityEvent) -> ProfileRecord:
        """
        IdP 이벤트로 프로필 생성/갱신

        Raises:
            InvalidInput: userId/email 누락 (저장소 호출 전)
            StoreUnavailable: 저장소 오류
        """
        if not event.user_id or not event.email:
            raise InvalidInput("User ID and email are required")

        current = self.store.get_by_user_id(event.user_id)
        payload = reconcile_identity_sync(event, current)

        if payload.kind == "update":
            logger.info(
                "[PROFILE_SYNC] update user_id=%s fields=%s",
                event.user_id, sorted(payload.fields),
            )
            return self.store.update(event.user_id, payload)

        try:
            record = self.store.create(payload)
            logger.info("[PROFILE_SYNC] created user_id=%s", event.user_id)
            return record
        except ProfileConflict:
            # 다른 탭/요청이 먼저 insert 함 -> 다시 읽어서 update 규칙으로 한 번만 재시도
            logger.warning("[PROFILE_SYNC] create raced, retry as update user_id=%s", event.user_id)
            current = self.store.get_by_user_id(event.user_id)
            if current is None:
                raise
            payload = reconcile_identity_sync(event, current)
            return self.store.update(event.user_id, payload)

    def apply_user_edit(self, edit: UserEditEvent) -> ProfileRecord:
        """
        사용자 수정 반영

        Raises:
            InvalidInput: userId 누락
            NotFound: 유저 없음
            StoreUnavailable: 저장소 오류
        """
        if not edit.user_id:
            raise InvalidInput("User ID is required")

        current = self.store.get_by_user_id(edit.user_id)
        payload = reconcile_user_edit(edit, current)
        logger.info(
            "[PROFILE_EDIT] user_id=%s fields=%s",
            edit.user_id, sorted(payload.fields),
        )
        return self.store.update(edit.user_id, payload)

    def get_profile(self, user_id: str) -> ProfileRecord:
        record = self.store.get_by_user_id(user_id)
        if record is None:
            raise NotFound(f"user {user_id} not found")
        return record

    def handle_auth_event(self, event_name: str, user: Dict[str, Any]) -> Optional[ProfileRecord]:
        """
        Supabase onAuthStateChange 이벤트 처리
        - SIGNED_IN / SIGNED_UP 일 때만 동기화 (토큰 갱신, 페이지 로드 시에는 무시)
        - 이메일 인증이 끝난 유저면 email_verified=True 반영

        Returns:
            갱신된 프로필, 무시한 이벤트면 None
        """
        if event_name not in identity.SYNC_EVENTS:
            logger.debug("[PROFILE_SYNC] skip auth event=%s", event_name)
            return None

        record = self.sync_identity(identity.identity_event_from_auth_user(user))

        if identity.is_email_confirmed(user) and not record.email_verified:
            record = self.apply_user_edit(
                UserEditEvent(user_id=record.id, email_verified=True)
            )
        return record
