from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt
from pydantic import ValidationError

from paperplay import schemas
from paperplay.core import security
from paperplay.core.config import settings

# operator tokens are minted by the auth service, this API only verifies them
reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=settings.OPERATOR_TOKEN_URL,
    scopes={settings.OPERATOR_SCOPE: "Manage tickets and orders"},
)


class OperatorAuth:
    @staticmethod
    def get_current_operator(
            token: str = Depends(reusable_oauth2)
    ) -> schemas.TokenPayload:
        try:
            payload = security.decode_access_token(token)
            token_data = schemas.TokenPayload(**payload)
        except (jwt.JWTError, ValidationError):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Could not validate credentials",
            )
        if not token_data.sub or settings.OPERATOR_SCOPE not in token_data.scopes:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Operator access required",
            )
        return token_data
