# app/services/sql_store.py
# SQLAlchemy 로 public.users 를 직접 다루는 저장소 (로컬 개발/테스트용)
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.models.user_profile import UserProfile
from app.schemas.profile import ProfileRecord, WritePayload
from app.services.errors import NotFound, ProfileConflict, StoreUnavailable
from app.services.profile_store import ProfileStore

logger = logging.getLogger(__name__)


class SqlProfileStore(ProfileStore):
    """
    요청마다 짧은 세션을 열고 바로 커밋한다.
    한 번의 create/update 가 하나의 트랜잭션.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get_by_user_id(self, user_id: str) -> Optional[ProfileRecord]:
        try:
            with self._session_factory() as db:
                prof = db.get(UserProfile, user_id)
                return ProfileRecord.model_validate(prof) if prof else None
        except SQLAlchemyError as e:
            logger.error("[SQL_STORE] select failed user_id=%s: %r", user_id, e)
            raise StoreUnavailable("database read failed") from e

    def create(self, payload: WritePayload) -> ProfileRecord:
        try:
            with self._session_factory() as db:
                prof = UserProfile(**payload.fields)
                db.add(prof)
                try:
                    db.commit()
                except IntegrityError as e:
                    db.rollback()
                    raise ProfileConflict(f"user {payload.user_id} already exists") from e
                db.refresh(prof)
                return ProfileRecord.model_validate(prof)
        except SQLAlchemyError as e:
            logger.error("[SQL_STORE] insert failed user_id=%s: %r", payload.user_id, e)
            raise StoreUnavailable("database write failed") from e

    def update(self, user_id: str, payload: WritePayload) -> ProfileRecord:
        try:
            with self._session_factory() as db:
                prof = db.get(UserProfile, user_id, with_for_update=True)
                if prof is None:
                    raise NotFound(f"user {user_id} not found")
                for name, value in payload.fields.items():
                    setattr(prof, name, value)
                db.commit()
                db.refresh(prof)
                return ProfileRecord.model_validate(prof)
        except SQLAlchemyError as e:
            logger.error("[SQL_STORE] update failed user_id=%s: %r", user_id, e)
            raise StoreUnavailable("database write failed") from e
