from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


def _encode_token(payload: dict) -> str:
    """python-jose may return bytes in some versions, normalize to str."""
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    if isinstance(token, bytes):
        token = token.decode("utf-8")
    return token


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return _encode_token(to_encode)


def decode_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token.strip(), settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning("JWT decode failed", error=str(e))
        return None
