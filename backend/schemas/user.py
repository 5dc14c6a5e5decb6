from datetime import datetime
from pydantic import BaseModel, EmailStr, ConfigDict, Field
from typing import Optional

# Schema for user authentication credentials
class UserLogin(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

# Schema for user registration requests
class UserCreate(UserLogin):
    email: EmailStr

# Output schema for user profile details
class UserResponse(BaseModel):
    id: int
    username: str
    email: EmailStr
    role: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
