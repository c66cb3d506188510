import math
import re
from datetime import datetime, timezone
from typing import Iterable, Optional

from cms.domains.content.blocks import ContentBlock, block_text

# Длинные slug ломают сборку статических страниц (ENAMETOOLONG)
MAX_SLUG_LENGTH = 100
WORDS_PER_MINUTE = 200
EXCERPT_LENGTH = 160

CONTENT_VERSION_MARKDOWN = 1
CONTENT_VERSION_BLOCKS = 2

STATUSES = ("draft", "published", "scheduled")

_MARKDOWN_PATTERNS = (
    (re.compile(r"#{1,6}\s"), ""),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*(.*?)\*"), r"\1"),
    (re.compile(r"\[(.*?)\]\(.*?\)"), r"\1"),
    (re.compile(r"`(.*?)`"), r"\1"),
    (re.compile(r"\n+"), " "),
)


def _truncate_slug(slug: str) -> str:
    """Обрезка до MAX_SLUG_LENGTH без разрыва слова; снимается один завершающий дефис"""
    if len(slug) > MAX_SLUG_LENGTH:
        slug = slug[:MAX_SLUG_LENGTH]
        last_hyphen = slug.rfind("-")
        if last_hyphen > MAX_SLUG_LENGTH - 20:
            slug = slug[:last_hyphen]
    return re.sub(r"-$", "", slug)


def slugify(text: str) -> str:
    """Slug из заголовка"""
    slug = text.lower()
    slug = re.sub(r"[^\w\s-]", "", slug, flags=re.ASCII)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"--+", "-", slug).strip()
    return _truncate_slug(slug)


def sanitize_slug(slug: Optional[str]) -> str:
    """Очистка slug от префиксов вида /blog/ и лишних слешей"""
    if not slug:
        return ""
    sanitized = re.sub(r"^/+", "", slug)
    sanitized = re.sub(r"^blog/+", "", sanitized, flags=re.IGNORECASE)
    sanitized = re.sub(r"/+$", "", sanitized)
    sanitized = re.sub(r"/+", "-", sanitized)
    return _truncate_slug(sanitized.lower().strip())


def calculate_word_count(text: str) -> int:
    return len(text.split())


def calculate_reading_time(text: str) -> int:
    """Время чтения в минутах (200 слов в минуту, с округлением вверх)"""
    return math.ceil(calculate_word_count(text) / WORDS_PER_MINUTE)


def generate_excerpt(content: str, max_length: int = EXCERPT_LENGTH) -> str:
    """Анонс из markdown: без разметки, не длиннее max_length"""
    plain = content
    for pattern, replacement in _MARKDOWN_PATTERNS:
        plain = pattern.sub(replacement, plain)
    plain = plain.strip()

    if len(plain) <= max_length:
        return plain
    return plain[:max_length - 3] + "..."


def blocks_text(blocks: Iterable[ContentBlock]) -> str:
    return "\n".join(text for text in (block_text(block) for block in blocks) if text)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Наивные даты считаются UTC"""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def is_publicly_visible(status: str, scheduled_at: Optional[datetime], now: datetime) -> bool:
    """Опубликованные посты и запланированные, время которых наступило"""
    if status == "published":
        return True
    if status == "scheduled" and scheduled_at is not None:
        return as_utc(scheduled_at) <= now
    return False
