# app/services/supa_auth.py
from typing import Dict
from jose import JWTError, jwt
import logging

logger = logging.getLogger(__name__)


def verify_bearer(
    authorization: str | None,
    secret: str | None,
    audience: str | None = None,
    issuer: str | None = None,
) -> Dict[str, str | None]:
    """
    - Authorization: Bearer <access_token> 헤더에서 토큰을 꺼내서
    - Supabase JWT secret(HS256)으로 검증하고
    - 기본적인 클레임(sub, email)을 반환한다.
    """
    if not secret:
        raise RuntimeError("SUPABASE_JWT_SECRET 환경변수가 설정되어 있지 않습니다.")

    if not authorization:
        raise ValueError("missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise ValueError("invalid Authorization header")

    token = parts[1].strip()
    if not token:
        raise ValueError("invalid Authorization header")

    # issuer/audience 는 None일 수도 있어서 옵션으로만 넣어줌
    decode_kwargs = {"algorithms": ["HS256"]}  # Supabase access token 의 alg
    if audience:
        decode_kwargs["audience"] = audience  # "authenticated"
    else:
        decode_kwargs["options"] = {"verify_aud": False}
    if issuer:
        decode_kwargs["issuer"] = issuer      # "https://.../auth/v1"

    try:
        claims = jwt.decode(token, secret, **decode_kwargs)
    except JWTError as e:
        logger.warning("[AUTH] JWT decode failed: %s", e)
        raise ValueError("invalid token") from e

    user_id = claims.get("sub")
    if not user_id:
        raise ValueError("invalid token: missing sub")

    return {
        "user_id": user_id,
        "email": claims.get("email"),
    }
