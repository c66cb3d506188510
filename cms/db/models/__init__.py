from cms.db.models.user import AdminUser
from cms.db.models.document import ContentDocument

__all__ = [
    "AdminUser",
    "ContentDocument",
]
