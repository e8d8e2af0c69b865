# app/services/identity.py
# Supabase auth user 객체 -> IdentityEvent 변환
from typing import Any, Dict, Iterable, Optional

from pydantic import ValidationError

from app.schemas.profile import IdentityEvent
from app.services.errors import InvalidInput

# 이 이벤트에서만 public.users 동기화 (INITIAL_SESSION, TOKEN_REFRESHED 는 무시)
SYNC_EVENTS = frozenset({"SIGNED_IN", "SIGNED_UP"})


def _first(meta: Dict[str, Any], keys: Iterable[str]) -> Optional[str]:
    # 문자열이 아닌 값(숫자, dict 등)은 없는 것으로 취급
    for key in keys:
        value = meta.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _metadata(user: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = user.get(key)
    return value if isinstance(value, dict) else {}


def detect_auth_provider(user: Dict[str, Any]) -> str:
    app_meta = _metadata(user, "app_metadata")
    user_meta = _metadata(user, "user_metadata")
    if app_meta.get("provider") == "google" or user_meta.get("provider") == "google":
        return "google"
    return "email"


def identity_event_from_auth_user(user: Dict[str, Any]) -> IdentityEvent:
    """
    Supabase auth user 의 user_metadata 에서 프로필 값을 뽑는다.
    - Google: name / given_name / family_name / picture
    - 이메일(매직링크): 보통 메타데이터가 비어 있음
    """
    meta = _metadata(user, "user_metadata")
    provider = detect_auth_provider(user)

    provider_id = None
    if provider == "google":
        provider_id = _first(meta, ("sub", "google_id")) or user.get("id")

    try:
        return IdentityEvent(
            user_id=user.get("id"),
            email=user.get("email"),
            full_name=_first(meta, ("name", "full_name", "fullName")),
            first_name=_first(meta, ("first_name", "firstName", "given_name")),
            last_name=_first(meta, ("last_name", "lastName", "family_name")),
            profile_picture=_first(meta, ("avatar_url", "picture", "profile_picture")),
            provider_id=provider_id,
            auth_provider=provider,
        )
    except ValidationError as e:
        # id/email 이 문자열이 아닌 경우 등
        raise InvalidInput(f"invalid auth user: {e.error_count()} field error(s)") from e


def is_email_confirmed(user: Dict[str, Any]) -> bool:
    return bool(user.get("email_confirmed_at"))
