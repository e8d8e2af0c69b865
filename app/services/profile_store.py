"""public.users 저장소 인터페이스"""
from abc import ABC, abstractmethod
from typing import Optional

from app.schemas.profile import ProfileRecord, WritePayload


class ProfileStore(ABC):
    """
    프로필 행 읽기/생성/수정
    - 구현체: SupabaseProfileStore(운영), SqlProfileStore(로컬/테스트)
    - 모든 네트워크/DB 오류는 StoreUnavailable 로 바꿔서 올린다
    """

    @abstractmethod
    def get_by_user_id(self, user_id: str) -> Optional[ProfileRecord]: ...

    @abstractmethod
    def create(self, payload: WritePayload) -> ProfileRecord:
        """중복 id 이면 ProfileConflict"""
        ...

    @abstractmethod
    def update(self, user_id: str, payload: WritePayload) -> ProfileRecord:
        """payload.fields 에 있는 컬럼만 갱신. 행이 없으면 NotFound"""
        ...
