from pydantic import BaseModel

class TokenPayload(BaseModel):
    user_id: int | None = None
    sub: str | None = None
    jti: str | None = None
    exp: int | None = None
