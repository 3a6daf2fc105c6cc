from pydantic import BaseModel


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AdminMeOut(BaseModel):
    id: int
    username: str
    role: str
    venue_permissions: list[str]

    class Config:
        from_attributes = True
