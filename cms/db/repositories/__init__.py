from cms.db.repositories.user_repository import AdminUserRepository
from cms.db.repositories.document_repository import DocumentStore, MemoryDocumentStore, SQLDocumentStore

__all__ = [
    "AdminUserRepository",
    "DocumentStore",
    "MemoryDocumentStore",
    "SQLDocumentStore",
]
