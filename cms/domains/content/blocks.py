import random
import string
import time
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field

BLOCK_TYPES = ("paragraph", "heading", "image", "quote", "list")
HEADING_LEVELS = (2, 3)

_BASE36 = string.digits + string.ascii_lowercase


class BlockBase(BaseModel):
    """Общие поля блока: стабильный id и позиция"""
    id: str
    order: int = 0

    model_config = {"extra": "ignore"}


class ParagraphBlock(BlockBase):
    type: Literal["paragraph"] = "paragraph"
    content: str = ""


class HeadingBlock(BlockBase):
    type: Literal["heading"] = "heading"
    content: str = ""
    # Проверяется validate_block, а не при разборе: старые посты хранят level=1
    level: int = 2


class ImageBlock(BlockBase):
    type: Literal["image"] = "image"
    url: str = ""
    alt: str = ""
    caption: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


class QuoteBlock(BlockBase):
    type: Literal["quote"] = "quote"
    content: str = ""
    attribution: Optional[str] = None


class ListBlock(BlockBase):
    type: Literal["list"] = "list"
    items: List[str] = Field(default_factory=lambda: [""])
    ordered: bool = False


ContentBlock = Annotated[
    Union[ParagraphBlock, HeadingBlock, ImageBlock, QuoteBlock, ListBlock],
    Field(discriminator="type"),
]

def dump_blocks(blocks: List[ContentBlock]) -> List[dict]:
    return [block.model_dump(exclude_none=True) for block in blocks]


def generate_block_id() -> str:
    """Генерация id блока: block_<epoch-ms>_<9 символов base36>"""
    suffix = "".join(random.choice(_BASE36) for _ in range(9))
    return f"block_{int(time.time() * 1000)}_{suffix}"


def create_block(block_type: str, order: int = 0, level: int = 2, ordered: bool = False) -> ContentBlock:
    """Создание блока с новым id и пустым содержимым нужного типа"""
    block_id = generate_block_id()
    match block_type:
        case "paragraph":
            return ParagraphBlock(id=block_id, order=order)
        case "heading":
            return HeadingBlock(id=block_id, order=order, level=level)
        case "image":
            return ImageBlock(id=block_id, order=order)
        case "quote":
            return QuoteBlock(id=block_id, order=order)
        case "list":
            return ListBlock(id=block_id, order=order, ordered=ordered)
        case _:
            raise ValueError(f"Unknown block type: {block_type}")


def validate_block(block: ContentBlock) -> bool:
    """Минимальная проверка блока по его типу"""
    match block:
        case HeadingBlock():
            return block.level in HEADING_LEVELS
        case ListBlock():
            return len(block.items) > 0
        case ImageBlock():
            return isinstance(block.url, str) and isinstance(block.alt, str)
        case ParagraphBlock() | QuoteBlock():
            return isinstance(block.content, str)
        case _:
            return False


def add_list_item(block: ListBlock, text: str = "") -> ListBlock:
    return block.model_copy(update={"items": [*block.items, text]})


def update_list_item(block: ListBlock, index: int, text: str) -> ListBlock:
    if not 0 <= index < len(block.items):
        raise IndexError(f"List item {index} out of range")
    items = list(block.items)
    items[index] = text
    return block.model_copy(update={"items": items})


def remove_list_item(block: ListBlock, index: int) -> ListBlock:
    """Удаление пункта списка; пустой список заменяется на ['']"""
    if not 0 <= index < len(block.items):
        raise IndexError(f"List item {index} out of range")
    items = block.items[:index] + block.items[index + 1:]
    return block.model_copy(update={"items": items or [""]})


def block_text(block: ContentBlock) -> str:
    """Простой текст блока (для подсчета слов и анонса)"""
    match block:
        case ParagraphBlock() | HeadingBlock():
            return block.content
        case QuoteBlock():
            return " ".join(part for part in (block.content, block.attribution) if part)
        case ListBlock():
            return " ".join(item for item in block.items if item)
        case ImageBlock():
            return block.caption or ""
        case _:
            raise ValueError(f"Unknown block: {block!r}")
