from pydantic import BaseModel


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class OperatorResponse(BaseModel):
    id: int
    username: str
    is_active: bool

    class Config:
        from_attributes = True
