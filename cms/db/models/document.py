from sqlalchemy import Column, String, JSON, DateTime, Integer, UniqueConstraint, func

from cms.core.db import Base


class ContentDocument(Base):
    """Документ хранилища: тело хранится плоским JSON, ключ - (путь коллекции, id)"""
    __tablename__ = "content_documents"
    __table_args__ = (
        UniqueConstraint("collection_path", "doc_id", name="uq_content_documents_path_id"),
    )

    pk = Column(Integer, primary_key=True, autoincrement=True)
    collection_path = Column(String(512), nullable=False, index=True)
    doc_id = Column(String(255), nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
