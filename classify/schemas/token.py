from pydantic import BaseModel

from classify.core.constants import RoleEnum

class TokenPayload(BaseModel):
    user_id: int
    role: RoleEnum
    jti: str | None = None
    exp: int | None = None
