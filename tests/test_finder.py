"""Unit tests for envmerge.finder."""

from envmerge.finder import find_intersection, find_next_variable, find_variable
from envmerge.models import CommentBlock, VariableBlock
from envmerge.parser import parse


class TestFindVariable:
    def test_found(self):
        doc = parse("A=1\nB=2")
        block = find_variable(doc, "B")
        assert block is doc.blocks[1]
        assert block.value == "2"

    def test_first_occurrence_wins(self):
        doc = parse("A=1\nA=2")
        assert find_variable(doc, "A").value == "1"

    def test_missing(self):
        assert find_variable(parse("A=1"), "B") is None

    def test_none_document(self):
        assert find_variable(None, "A") is None

    def test_comment_text_is_not_a_key(self):
        assert find_variable(parse("# A=1\n\nB=2"), "A") is None


class TestFindNextVariable:
    def test_skips_comments_and_blanks(self):
        doc = parse("# banner\n\n# more\nKEY=v")
        banner = doc.blocks[0]
        assert isinstance(banner, CommentBlock)
        assert find_next_variable(doc, banner).key == "KEY"

    def test_strictly_after(self):
        doc = parse("A=1\nB=2")
        assert find_next_variable(doc, doc.blocks[0]).key == "B"

    def test_none_at_end(self):
        doc = parse("A=1\n\n# trailing")
        assert find_next_variable(doc, doc.blocks[-1]) is None

    def test_block_not_in_document(self):
        doc = parse("A=1")
        assert find_next_variable(doc, VariableBlock("X", "", "X=")) is None


class TestFindIntersection:
    def test_returns_block_from_other_document(self):
        source = parse("NEW=1\nSHARED=2")
        base = parse("SHARED=0")
        point = find_intersection(source, source.blocks[1], base)
        assert point is base.blocks[0]

    def test_start_is_inclusive(self):
        source = parse("SHARED=2")
        base = parse("X=1\nSHARED=0")
        assert find_intersection(source, source.blocks[0], base) is base.blocks[1]

    def test_first_shared_key_after_start(self):
        source = parse("N1=1\nN2=2\nB=3\nA=4")
        base = parse("A=0\nB=0")
        assert find_intersection(source, source.blocks[1], base).key == "B"

    def test_no_shared_key(self):
        source = parse("N1=1\nN2=2")
        assert find_intersection(source, source.blocks[0], parse("A=1")) is None

    def test_none_start(self):
        assert find_intersection(parse("A=1"), None, parse("A=1")) is None
