import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt

from classify.core.config import settings

ALGORITHM = "HS256"


def create_access_token(data: Dict[str, Any], expires_minutes: Optional[int] = None) -> str:
    """Issue a bearer token for the identity service and the test suite.

    The payload carries ``user_id`` and ``role``; ``jti`` and ``exp`` are added here.
    """
    to_encode = data.copy()
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    to_encode.update({"exp": expire, "jti": str(uuid.uuid4())})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
