"""Unit tests for cms.domains.content.blocks"""

import re

import pytest
from pydantic import ValidationError

from cms.domains.blog.schemas import BlogPost
from cms.domains.content.blocks import (
    HeadingBlock, ImageBlock, ListBlock, ParagraphBlock, QuoteBlock, add_list_item, block_text,
    create_block, dump_blocks, generate_block_id, remove_list_item, update_list_item,
    validate_block,
)


def test_block_id_format():
    assert re.fullmatch(r"block_\d+_[0-9a-z]{9}", generate_block_id())


def test_create_block_uses_type_defaults():
    paragraph = create_block("paragraph")
    heading = create_block("heading")
    items = create_block("list")

    assert isinstance(paragraph, ParagraphBlock) and paragraph.content == ""
    assert isinstance(heading, HeadingBlock) and heading.level == 2
    assert isinstance(items, ListBlock) and items.items == [""] and items.ordered is False
    assert create_block("image").url == ""
    assert create_block("quote").attribution is None


def test_create_block_ids_are_unique():
    assert create_block("paragraph").id != create_block("paragraph").id


def test_create_block_unknown_type():
    with pytest.raises(ValueError, match="Unknown block type"):
        create_block("video")


def test_removing_last_list_item_leaves_single_empty_entry():
    block = ListBlock(id="l1", items=["x"])
    assert remove_list_item(block, 0).items == [""]


def test_list_item_editing():
    block = add_list_item(ListBlock(id="l1", items=["one"]), "two")
    block = update_list_item(block, 0, "first")
    assert block.items == ["first", "two"]
    assert remove_list_item(block, 1).items == ["first"]

    with pytest.raises(IndexError):
        update_list_item(block, 5, "nope")


def test_validate_block_per_variant():
    assert validate_block(HeadingBlock(id="h", level=3))
    assert not validate_block(HeadingBlock(id="h", level=1))
    assert not validate_block(ListBlock(id="l", items=[]))
    assert validate_block(ImageBlock(id="i", url="https://example.com/a.png", alt="A"))
    assert validate_block(QuoteBlock(id="q", content="Quote"))


def test_stored_blocks_dispatch_on_type():
    post = BlogPost.model_validate({"title": "T", "slug": "t", "contentBlocks": [
        {"id": "p", "type": "paragraph", "content": "Hello", "order": 0},
        {"id": "l", "type": "list", "items": ["a", "b"], "ordered": True, "order": 1},
    ]})
    blocks = post.content_blocks
    assert isinstance(blocks[0], ParagraphBlock)
    assert isinstance(blocks[1], ListBlock) and blocks[1].ordered


def test_stored_blocks_reject_unknown_type():
    with pytest.raises(ValidationError):
        BlogPost.model_validate({"title": "T", "slug": "t", "contentBlocks": [{"id": "x", "type": "video"}]})


def test_dump_blocks_omits_empty_optionals():
    dumped = dump_blocks([QuoteBlock(id="q", content="Hi")])
    assert dumped == [{"id": "q", "order": 0, "type": "quote", "content": "Hi"}]


def test_block_text():
    assert block_text(QuoteBlock(id="q", content="Be kind", attribution="Anon")) == "Be kind Anon"
    assert block_text(ListBlock(id="l", items=["a", "", "b"])) == "a b"
    assert block_text(ImageBlock(id="i", caption="Sunset")) == "Sunset"
