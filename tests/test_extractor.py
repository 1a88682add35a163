"""Tests for block extraction from (possibly partial) text."""

import json

from uicp.blocks.extractor import (
    BlockExtractor,
    extract_blocks,
    format_block,
    has_blocks,
    placeholder,
)


def fence(payload: dict, tag: str = "uicp") -> str:
    return f"```{tag}\n{json.dumps(payload)}\n```"


class TestExtractBlocks:
    def test_plain_text_unchanged(self):
        text = "Just a normal answer.\n\nWith two paragraphs."
        result = extract_blocks(text)
        assert result.blocks == []
        assert result.text == text

    def test_single_block_replaced_by_placeholder(self):
        data = {"title": "Hello", "items": [1, 2, {"nested": True}]}
        text = f"Intro\n{fence({'uid': 'Card', 'data': data})}\nOutro"

        result = extract_blocks(text)

        assert len(result.blocks) == 1
        assert result.blocks[0].uid == "Card"
        assert result.blocks[0].data == data
        assert result.text == f"Intro\n{placeholder(0)}\nOutro"

    def test_multiple_blocks_in_order(self):
        text = (
            f"a {fence({'uid': 'Card', 'data': {'title': '1'}})} "
            f"b {fence({'uid': 'Table', 'data': {}})} "
            f"c {fence({'uid': 'Card', 'data': {'title': '2'}})}"
        )

        result = extract_blocks(text)

        assert [b.uid for b in result.blocks] == ["Card", "Table", "Card"]
        assert result.blocks[2].data == {"title": "2"}
        assert result.text == f"a {placeholder(0)} b {placeholder(1)} c {placeholder(2)}"

    def test_repeated_identical_blocks_are_independent(self):
        block = fence({"uid": "Card", "data": {"title": "same"}})
        result = extract_blocks(f"{block}\n{block}")
        assert len(result.blocks) == 2
        assert result.text == f"{placeholder(0)}\n{placeholder(1)}"

    def test_malformed_json_left_as_text(self):
        broken = "```uicp\n{\"uid\": \"Card\", \"data\": {\n```"
        text = f"before {broken} after"

        result = extract_blocks(text)

        assert result.blocks == []
        assert result.text == text

    def test_missing_members_left_as_text(self):
        no_data = fence({"uid": "Card"})
        no_uid = fence({"data": {"title": "x"}})
        text = f"{no_data}\n{no_uid}"

        result = extract_blocks(text)

        assert result.blocks == []
        assert result.text == text

    def test_malformed_block_does_not_shift_indices(self):
        text = (
            f"{fence({'uid': 'Card'})} "
            f"{fence({'uid': 'Table', 'data': {'rows': []}})}"
        )
        result = extract_blocks(text)
        assert len(result.blocks) == 1
        assert result.text.endswith(placeholder(0))

    def test_empty_data_is_accepted(self):
        result = extract_blocks(fence({"uid": "Card", "data": {}}))
        assert len(result.blocks) == 1
        assert result.blocks[0].data == {}

    def test_block_alias_tag(self):
        result = extract_blocks(fence({"uid": "Card", "data": {"title": "x"}}, tag="block"))
        assert len(result.blocks) == 1


    def test_info_string_after_tag(self):
        text = 'Before\n```uicp json\n{"uid": "Card", "data": {"title": "x"}}\n```\nAfter'
        result = extract_blocks(text)
        assert [b.uid for b in result.blocks] == ["Card"]
        assert result.text == f"Before\n{placeholder(0)}\nAfter"


class TestIncompleteBlocks:
    def test_unterminated_block_truncated(self):
        text = 'Hello ```block\n{"uid":"Card","data":'
        result = extract_blocks(text)
        assert result.blocks == []
        assert result.text == "Hello"

    def test_truncation_after_complete_blocks(self):
        complete = fence({"uid": "Card", "data": {"title": "done"}})
        text = f"Start {complete}\nMore text  \n\n```uicp\n{{\"uid\": \"Ta"

        result = extract_blocks(text)

        assert len(result.blocks) == 1
        assert result.text == f"Start {placeholder(0)}\nMore text"

    def test_bare_opening_marker_truncated(self):
        assert extract_blocks("Here it comes:\n```uicp").text == "Here it comes:"

    def test_malformed_complete_block_not_truncated(self):
        broken = "```uicp\nnot json\n```"
        text = f"keep {broken} tail"
        assert extract_blocks(text).text == text

    def test_other_code_fences_untouched(self):
        text = "```python\nprint('hi')\n```\nand ```blockquote"
        result = extract_blocks(text)
        assert result.text == text


class TestHasBlocks:
    def test_plain_text(self):
        assert has_blocks("no markers here") is False

    def test_complete_block(self):
        assert has_blocks(fence({"uid": "Card", "data": {}})) is True

    def test_incomplete_block(self):
        assert has_blocks("Streaming... ```uicp\n{") is True

    def test_custom_tags(self):
        extractor = BlockExtractor(tags=["widget"])
        assert extractor.has_blocks("```widget\n") is True
        assert extractor.has_blocks("```uicp\n") is False


def test_format_block_round_trips():
    data = {"title": "Quarterly", "rows": [["Q1", "1"]]}
    result = extract_blocks(f"Here:\n{format_block('Table', data)}")
    assert result.blocks[0].uid == "Table"
    assert result.blocks[0].data == data
