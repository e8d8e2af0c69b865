from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# -- Event (Request) --

# 로그인/회원가입 시 IdP 메타데이터로 들어오는 동기화 이벤트
# - 프론트가 camelCase 로 보내므로 alias 로 받고, 코드에서는 snake_case 로 쓴다
# - userId/email 검증은 reconciler 쪽에서 InvalidInput 으로 처리 (400)
class IdentityEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, validation_alias=AliasChoices("userId", "user_id"))
    email: Optional[str] = None
    full_name: Optional[str] = Field(None, validation_alias=AliasChoices("fullName", "full_name"))
    first_name: Optional[str] = Field(None, validation_alias=AliasChoices("firstName", "first_name"))
    last_name: Optional[str] = Field(None, validation_alias=AliasChoices("lastName", "last_name"))
    profile_picture: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("profilePicture", "profilePictureUrl", "profile_picture"),
        description="URL 또는 data URI",
    )
    provider_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("googleId", "providerId", "provider_id"),
        description="IdP 쪽 subject id",
    )
    auth_provider: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("authProvider", "auth_provider"),
        description="email | google",
    )


# 사용자가 직접 수정하는 이벤트 (프로필 페이지, 이메일 인증 완료 등)
# - "보내지 않은 필드"와 "null 로 보낸 필드"를 구분해야 하므로 model_fields_set 을 사용
class UserEditEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, validation_alias=AliasChoices("userId", "user_id"))
    email_verified: Optional[bool] = Field(None, validation_alias=AliasChoices("emailVerified", "email_verified"))
    full_name: Optional[str] = Field(None, validation_alias=AliasChoices("fullName", "full_name"))
    profile_picture: Optional[str] = Field(
        None, validation_alias=AliasChoices("profilePicture", "profile_picture")
    )

    def provided(self) -> Dict[str, Any]:
        """요청에 실제로 포함된 필드만 반환 (user_id 제외)"""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name != "user_id"
        }


# Supabase auth 상태 변경 이벤트 (SIGNED_IN, SIGNED_UP, TOKEN_REFRESHED ...)
class AuthStateEvent(BaseModel):
    event: str = Field(..., min_length=1, description="Supabase onAuthStateChange 이벤트명")
    user: Dict[str, Any] = Field(default_factory=dict, description="Supabase auth user 객체")


# -- Store --

# public.users 한 행
class ProfileRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    email: str
    full_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_picture: Optional[str] = None
    # 테이블 컬럼명은 google_id
    provider_id: Optional[str] = Field(None, validation_alias=AliasChoices("provider_id", "google_id"))
    auth_provider: Optional[str] = None
    email_verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        # postgres uuid 컬럼이면 UUID 객체로 올 수 있음
        return str(v) if v is not None else v

    @field_validator("email_verified", mode="before")
    @classmethod
    def _null_is_false(cls, v: Any) -> Any:
        return False if v is None else v


# reconciler 결과: 저장소에 그대로 한 번에 적용할 변경분
# - fields 에 없는 컬럼은 건드리지 않는다 (현재 값 유지)
class WritePayload(BaseModel):
    kind: Literal["create", "update"]
    user_id: str
    fields: Dict[str, Any] = Field(default_factory=dict)


# -- Response --

class UserResponse(BaseModel):
    user: Optional[ProfileRecord] = None
    skipped: bool = False
