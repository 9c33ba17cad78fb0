from typing import List, Optional

from pydantic import BaseModel


class TokenPayload(BaseModel):
    sub: Optional[str] = None
    scopes: List[str] = []
