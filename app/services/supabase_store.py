# app/services/supabase_store.py
# Supabase(PostgREST) public.users 테이블 저장소
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from postgrest.exceptions import APIError
from supabase import Client, create_client

from app.schemas.profile import ProfileRecord, WritePayload
from app.services.errors import NotFound, ProfileConflict, StoreUnavailable
from app.services.profile_store import ProfileStore

logger = logging.getLogger(__name__)

# 코드 필드명 -> 테이블 컬럼명 (다른 건 동일)
_COLUMN_NAMES = {"provider_id": "google_id"}

# postgres unique_violation
_UNIQUE_VIOLATION = "23505"


def create_supabase_client(url: str | None, service_role_key: str | None) -> Client:
    """
    서버 전용 admin 클라이언트 생성 (service role key 사용)
    - 프로세스 시작 시 main.lifespan 에서 한 번만 호출
    """
    if not url or not service_role_key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in .env")
    return create_client(url, service_role_key)


def _to_row(fields: Dict[str, Any]) -> Dict[str, Any]:
    # datetime 은 JSON 직렬화가 안 되므로 ISO 문자열로 변환
    row = {}
    for name, value in fields.items():
        if isinstance(value, datetime):
            value = value.isoformat()
        row[_COLUMN_NAMES.get(name, name)] = value
    return row


class SupabaseProfileStore(ProfileStore):
    def __init__(self, client: Client, table: str = "users"):
        self._client = client
        self._table = table

    def _query(self):
        return self._client.table(self._table)

    # 유저 조회 (ID로)
    def get_by_user_id(self, user_id: str) -> Optional[ProfileRecord]:
        try:
            response = self._query().select("*").eq("id", user_id).execute()
        except Exception as e:
            logger.error("[SUPABASE_STORE] select failed user_id=%s: %r", user_id, e)
            raise StoreUnavailable("database read failed") from e
        return ProfileRecord.model_validate(response.data[0]) if response.data else None

    # 유저 생성
    def create(self, payload: WritePayload) -> ProfileRecord:
        try:
            response = self._query().insert(_to_row(payload.fields)).execute()
        except APIError as e:
            if e.code == _UNIQUE_VIOLATION:
                raise ProfileConflict(f"user {payload.user_id} already exists") from e
            logger.error("[SUPABASE_STORE] insert failed user_id=%s: %s", payload.user_id, e.message)
            raise StoreUnavailable("database write failed") from e
        except Exception as e:
            logger.error("[SUPABASE_STORE] insert failed user_id=%s: %r", payload.user_id, e)
            raise StoreUnavailable("database write failed") from e

        if not response.data:
            raise StoreUnavailable("DB returned no data")
        return ProfileRecord.model_validate(response.data[0])

    # 유저 수정 (payload 에 있는 컬럼만)
    def update(self, user_id: str, payload: WritePayload) -> ProfileRecord:
        try:
            response = (
                self._query()
                .update(_to_row(payload.fields))
                .eq("id", user_id)
                .execute()
            )
        except Exception as e:
            logger.error("[SUPABASE_STORE] update failed user_id=%s: %r", user_id, e)
            raise StoreUnavailable("database write failed") from e

        # 매칭되는 행이 없으면 PostgREST 는 빈 배열을 돌려준다
        if not response.data:
            raise NotFound(f"user {user_id} not found")
        return ProfileRecord.model_validate(response.data[0])
