# app/models/user_profile.py
# public.users 테이블 모델 (auth.users.id 를 PK로 그대로 사용)
from sqlalchemy import Boolean, Column, String, Text, DateTime
from app.db.session import Base

class UserProfile(Base):
    __tablename__ = "users"
    id = Column(String(64), primary_key=True)  # = auth.users.id (uuid 문자열)
    email = Column(String(255), nullable=False)
    full_name = Column(String(255))
    first_name = Column(String(100))
    last_name = Column(String(100))
    profile_picture = Column(Text)  # URL 또는 base64 data URI
    provider_id = Column("google_id", String(255))
    auth_provider = Column(String(20))
    email_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
