from pydantic import BaseModel, Field


class AccountCreate(BaseModel):
    identity: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)


class AccountOut(BaseModel):
    identity: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
