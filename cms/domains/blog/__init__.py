from cms.domains.blog.entities import slugify, sanitize_slug, generate_excerpt, calculate_reading_time
from cms.domains.blog.schemas import BlogPost, BlogCreate, BlogUpdate
from cms.domains.blog.services import BlogService

__all__ = [
    "slugify",
    "sanitize_slug",
    "generate_excerpt",
    "calculate_reading_time",
    "BlogPost",
    "BlogCreate",
    "BlogUpdate",
    "BlogService",
]
