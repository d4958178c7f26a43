from typing import Optional
from pydantic import BaseModel, EmailStr, ConfigDict

class UserSchema(BaseModel):
    id: int
    username: Optional[str] = None
    email: EmailStr
    locale: Optional[str] = None
    is_active: bool
    model_config = ConfigDict(from_attributes=True)

class UserCreate(BaseModel):
    username: Optional[str] = None
    email: EmailStr
    locale: Optional[str] = None
    model_config = ConfigDict(extra="forbid")
