from pydantic import BaseModel, EmailStr, Field


class AdminLogin(BaseModel):
    """Схема для входа администратора"""
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class Token(BaseModel):
    """Схема для JWT токена"""
    access_token: str
    token_type: str = "bearer"


class VerifyResponse(BaseModel):
    """Схема ответа проверки сессии"""
    authenticated: bool
    email: str
