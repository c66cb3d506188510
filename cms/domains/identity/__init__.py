from cms.domains.identity.entities import AdminUser
from cms.domains.identity.schemas import AdminLogin, Token, VerifyResponse

# IdentityService импортируется из cms.domains.identity.services напрямую:
# репозиторий пользователей сам зависит от entities этого пакета
__all__ = [
    "AdminUser",
    "AdminLogin", "Token", "VerifyResponse",
]
