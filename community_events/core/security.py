from typing import Optional

from jose import jwt, JWTError
from community_events.core.config import settings

ALGORITHM = "HS256"


def decode_token(token: str) -> Optional[str]:
    """Returns user ID (sub claim) or None if token is invalid/expired."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[ALGORITHM],
            options={"verify_aud": False},
        )
        return payload.get("sub")
    except JWTError:
        return None
