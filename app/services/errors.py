# app/services/errors.py
# 프로필 동기화 도메인 예외
# - 라우터에서 HTTPException 으로 변환한다 (400 / 404 / 500)


class ProfileError(Exception):
    """프로필 동기화 관련 예외의 공통 부모"""

    message = "profile_error"

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.message)
        self.detail = detail


class InvalidInput(ProfileError):
    # userId / email 누락 등 요청 자체가 잘못된 경우
    message = "invalid_input"


class NotFound(ProfileError):
    # 수정 대상 유저 행이 없음
    message = "user_not_found"


class StoreUnavailable(ProfileError):
    # Supabase / DB 호출 실패
    message = "store_unavailable"


class ProfileConflict(ProfileError):
    # 같은 id로 동시에 insert 된 경우 (중복 키)
    message = "profile_conflict"
