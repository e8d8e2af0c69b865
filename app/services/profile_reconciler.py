"""
프로필 병합 규칙 (순수 계산, I/O 없음)
- IdP 동기화: 처음 한 번만 IdP 값을 믿고, 사용자가 채운 값은 덮어쓰지 않는다
- 사용자 수정: 보낸 값은 무조건 반영 (null/빈 값이면 지우기)

필드별 정책은 아래 표(IDENTITY_SYNC_POLICY / USER_EDIT_POLICY)에 있고,
_merge() 하나로 두 경로 모두 처리한다.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from app.schemas.profile import IdentityEvent, ProfileRecord, UserEditEvent, WritePayload
from app.services.errors import InvalidInput, NotFound


class FieldPolicy(str, Enum):
    REFRESH = "refresh"    # 값이 오면 항상 덮어쓰기
    STICKY = "sticky"      # 현재 값이 비어 있을 때만 채우기
    VERBATIM = "verbatim"  # 보낸 그대로 덮어쓰기 (null/빈 값 = 지우기)


# IdP 메타데이터 동기화 정책
IDENTITY_SYNC_POLICY: Dict[str, FieldPolicy] = {
    "full_name": FieldPolicy.STICKY,
    "profile_picture": FieldPolicy.STICKY,
    "first_name": FieldPolicy.REFRESH,
    "last_name": FieldPolicy.REFRESH,
    "provider_id": FieldPolicy.REFRESH,
    "auth_provider": FieldPolicy.REFRESH,
}

# 사용자 직접 수정 정책
USER_EDIT_POLICY: Dict[str, FieldPolicy] = {
    "email_verified": FieldPolicy.VERBATIM,
    "full_name": FieldPolicy.VERBATIM,
    "profile_picture": FieldPolicy.VERBATIM,
}

# 빈 문자열을 "지우기(None)"로 바꿔 저장하는 필드
_CLEAR_EMPTY_TO_NULL = {"profile_picture"}

# null 로 지울 수 없는 필드 (NOT NULL 컬럼)
_NOT_NULLABLE = {"email_verified"}


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _merge(
    policy: Mapping[str, FieldPolicy],
    incoming: Mapping[str, Any],
    current: Optional[ProfileRecord],
) -> Dict[str, Any]:
    """
    정책 표를 incoming 값에 적용해 변경할 필드만 돌려준다.
    incoming 에 없는 키는 "보내지 않음"으로 취급.
    """
    changes: Dict[str, Any] = {}
    for name, rule in policy.items():
        if name not in incoming:
            continue
        value = incoming[name]

        if rule is FieldPolicy.VERBATIM:
            if name in _CLEAR_EMPTY_TO_NULL and value == "":
                value = None
            changes[name] = value
            continue

        # REFRESH / STICKY 는 빈 값이면 아무것도 하지 않음
        if _is_empty(value):
            continue

        if rule is FieldPolicy.STICKY and current is not None:
            if not _is_empty(getattr(current, name)):
                continue

        changes[name] = value
    return changes


def reconcile_identity_sync(
    event: IdentityEvent,
    current: Optional[ProfileRecord],
    now: Optional[datetime] = None,
) -> WritePayload:
    """
    IdP 로그인 이벤트 + 현재 행 -> 저장할 payload

    Raises:
        InvalidInput: userId 또는 email 누락
    """
    if _is_empty(event.user_id) or _is_empty(event.email):
        raise InvalidInput("User ID and email are required")

    now = now or _utcnow()
    incoming = {name: getattr(event, name) for name in IDENTITY_SYNC_POLICY}
    changes = _merge(IDENTITY_SYNC_POLICY, incoming, current)

    if current is None:
        # 신규 행: 모든 컬럼을 채우고, 안 온 값은 null
        fields: Dict[str, Any] = {"id": event.user_id, "email": event.email}
        for name in IDENTITY_SYNC_POLICY:
            fields[name] = changes.get(name)
        fields["email_verified"] = False
        fields["created_at"] = now
        fields["updated_at"] = now
        return WritePayload(kind="create", user_id=event.user_id, fields=fields)

    fields = {"email": event.email, "updated_at": now}
    fields.update(changes)
    return WritePayload(kind="update", user_id=event.user_id, fields=fields)


def reconcile_user_edit(
    edit: UserEditEvent,
    current: Optional[ProfileRecord],
    now: Optional[datetime] = None,
) -> WritePayload:
    """
    사용자 수정 이벤트 + 현재 행 -> 저장할 payload

    Raises:
        InvalidInput: userId 누락 또는 emailVerified=null
        NotFound: 대상 행이 없거나 id 불일치
    """
    if _is_empty(edit.user_id):
        raise InvalidInput("User ID is required")
    if current is None or current.id != edit.user_id:
        raise NotFound(f"user {edit.user_id} not found")

    provided = edit.provided()
    for name in _NOT_NULLABLE:
        if name in provided and provided[name] is None:
            raise InvalidInput(f"{name} cannot be null")

    fields: Dict[str, Any] = {"updated_at": now or _utcnow()}
    fields.update(_merge(USER_EDIT_POLICY, provided, current))
    return WritePayload(kind="update", user_id=edit.user_id, fields=fields)
