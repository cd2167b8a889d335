from pydantic import BaseModel, EmailStr
from datetime import datetime

class UserCreate(BaseModel):
    email: EmailStr
    username: str
    password: str

class UserLogin(BaseModel):
    identifier: str
    password: str

class UserOut(BaseModel):
    id: int
    email: EmailStr
    username: str
    role: str
    balance: float
    created_at: datetime | None = None

    class Config:
        from_attributes = True
