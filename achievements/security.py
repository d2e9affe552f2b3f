"""Student identity tokens for the activity-log endpoint (HS256 JWT, subject = student id)."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from achievements.config import Settings


def issue_student_token(student_id: str, config: Settings, expires_in: Optional[timedelta] = None) -> str:
    lifetime = expires_in or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {"sub": student_id, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, config.SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def student_id_from_token(token: str, config: Settings) -> Optional[str]:
    """The token's subject, or None when the token is malformed, expired or signed with another key."""
    try:
        claims = jwt.decode(token, config.SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except JWTError:
        return None
    subject = claims.get("sub")
    return str(subject) if subject else None
