from datetime import datetime, timedelta, timezone
from typing import Any, List, Union
from jose import jwt
import secrets

from paperplay.core.config import settings

ALGORITHM = "HS256"

# no 0/O or 1/I, codes get typed in by hand from printed stickers
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def create_access_token(
        subject: Union[str, Any],
        scopes: List[str] = None,
        expires_delta: timedelta = None
) -> str:
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    to_encode = {"exp": expire, "sub": str(subject), "iat": now, "scopes": scopes or []}
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])


def get_random_string(length: int = 10, alphabet: str = CODE_ALPHABET) -> str:
    return ''.join(secrets.choice(alphabet) for _ in range(length))
