from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from cms.domains.blog.entities import CONTENT_VERSION_MARKDOWN, as_utc
from cms.domains.content.blocks import ContentBlock, validate_block
from cms.domains.content.schemas import CamelModel

BlogStatus = Literal["draft", "published", "scheduled"]


def _check_blocks(blocks: Optional[List[ContentBlock]]) -> Optional[List[ContentBlock]]:
    for block in blocks or []:
        if not validate_block(block):
            raise ValueError(f"Invalid content block: {block.id}")
    return blocks


class BlogAuthor(CamelModel):
    id: str = ""
    name: str = ""
    avatar: Optional[str] = None
    bio: Optional[str] = None


class BlogPost(CamelModel):
    """Документ поста блога (artifacts/{app_id}/public/data/blogs/{id})"""
    id: str = ""
    title: str
    slug: str
    excerpt: str = ""
    content: str = ""
    content_blocks: List[ContentBlock] = Field(default_factory=list)
    content_version: int = CONTENT_VERSION_MARKDOWN
    status: BlogStatus = "draft"
    category: str = ""
    tags: List[str] = Field(default_factory=list)
    scheduled_at: Optional[datetime] = None
    published_at: Optional[datetime] = None
    meta_title: str = ""
    meta_desc: str = ""
    keywords: str = ""
    image_url: str = ""
    word_count: int = 0
    reading_time: int = 0
    author: Optional[BlogAuthor] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("scheduled_at", "published_at", "created_at", "updated_at")
    @classmethod
    def normalize_dates(cls, v):
        return as_utc(v)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class BlogCreate(CamelModel):
    """Схема для создания поста"""
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = Field(None, max_length=200)
    content: str = Field(default="", max_length=100_000)
    content_blocks: Optional[List[ContentBlock]] = None
    excerpt: str = Field(default="", max_length=300)
    meta_title: str = Field(default="", max_length=200)
    meta_desc: str = Field(default="", max_length=160)
    keywords: str = Field(default="", max_length=500)
    image_url: str = Field(default="", max_length=2000)
    category: str = Field(default="", max_length=100)
    tags: List[str] = Field(default_factory=list)
    status: BlogStatus = "draft"
    scheduled_at: Optional[datetime] = None
    author: Optional[BlogAuthor] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("content_blocks")
    @classmethod
    def validate_blocks(cls, v):
        return _check_blocks(v)

    @model_validator(mode="after")
    def check_schedule(self):
        if self.status == "scheduled" and self.scheduled_at is None:
            raise ValueError("scheduledAt is required for scheduled posts")
        return self


class BlogUpdate(CamelModel):
    """Схема для частичного обновления поста"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, max_length=100_000)
    content_blocks: Optional[List[ContentBlock]] = None
    excerpt: Optional[str] = Field(None, max_length=300)
    meta_title: Optional[str] = Field(None, max_length=200)
    meta_desc: Optional[str] = Field(None, max_length=160)
    keywords: Optional[str] = Field(None, max_length=500)
    image_url: Optional[str] = Field(None, max_length=2000)
    category: Optional[str] = Field(None, max_length=100)
    tags: Optional[List[str]] = None
    status: Optional[BlogStatus] = None
    scheduled_at: Optional[datetime] = None
    author: Optional[BlogAuthor] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip() if v else v

    @field_validator("content_blocks")
    @classmethod
    def validate_blocks(cls, v):
        return _check_blocks(v)


class BlockCreate(CamelModel):
    """Схема для добавления блока"""
    type: Literal["paragraph", "heading", "image", "quote", "list"]
    level: int = 2
    ordered: bool = False
    # Позиция вставки; по умолчанию - в конец
    index: Optional[int] = Field(None, ge=0)
    data: Dict[str, Any] = Field(default_factory=dict)


class BlogListResponse(CamelModel):
    """Схема для списка постов"""
    posts: List[Dict[str, Any]]
    total: int
    page: int
    per_page: int
