from cms.domains.content.blocks import ContentBlock, create_block, validate_block, block_text
from cms.domains.content.collection import OrderedCollection, renumber
from cms.domains.content.reorder import ReorderController
from cms.domains.content.schemas import merge_with_defaults, extract_reel_id

__all__ = [
    "ContentBlock",
    "create_block",
    "validate_block",
    "block_text",
    "OrderedCollection",
    "renumber",
    "ReorderController",
    "merge_with_defaults",
    "extract_reel_id",
]
