from pydantic import BaseModel, EmailStr
from typing import Literal


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenOut(BaseModel):
    access_token: str
    token_type: Literal["bearer"] = "bearer"


class LoginUserOut(BaseModel):
    id: int
    username: str
    role: str
    company_id: int


class LoginOut(BaseModel):
    auth: TokenOut
    user: LoginUserOut
