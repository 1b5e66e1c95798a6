"""Auth Service 도메인 서비스 레이어입니다. 외부 인증 시스템과 공유하는 비밀키로 토큰을 발급합니다."""

from datetime import datetime, timedelta
from jose import jwt
from noticeboard.config import settings

ALGORITHM = "HS256"


def create_access_token(username: str, expires_minutes: int | None = None) -> str:
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.utcnow() + timedelta(minutes=minutes)
    payload = {"sub": username, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)
