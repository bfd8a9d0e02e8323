"""Tests for fold/unfold of slices."""

import copy

import pytest

from jpreview.decorator import decorate
from jpreview.errors import FoldError

NESTED = """\
{
    "a": [1, 2],
    "b": {
        "c": {"d": [true, null]},
        "e": "x"
    },
    "f": []
}"""


def texts(result):
    return [sl.text for sl in result.slices]


def numbers(result):
    return [sl.line_number for sl in result.slices]


def node_id(result, text):
    """Id of the node owning the first line whose stripped text starts with *text*."""
    for sl in result.slices:
        if sl.text.strip().startswith(text):
            return sl.owner_id
    raise AssertionError(text)


class TestToggleFold:
    """toggle_fold patches the slice list in place."""

    def test_collapse_array_example(self):
        result = decorate('{"a":[1,2]}')
        assert len(result.slices) == 6
        update = result.toggle_fold(1)
        assert texts(result) == ["{", '    "a": [...]', "}"]
        assert numbers(result) == [1, 2, 3]
        assert (update.start, update.stop, update.delta) == (1, 5, -3)
        assert [sl.text for sl in update.slices] == ['    "a": [...]']
        assert result.slices[1].folded
        assert result.slices[1].foldable

    def test_expand_restores(self):
        result = decorate('{"a":[1,2]}')
        result.toggle_fold(1)
        update = result.toggle_fold(1)
        assert (update.start, update.stop, update.delta) == (1, 2, 3)
        assert len(result.slices) == 6

    def test_double_toggle_is_identity(self):
        result = decorate(NESTED)
        for sl in list(result.slices):
            if not sl.foldable:
                continue
            before = copy.deepcopy(result.slices)
            result.toggle_fold(sl.owner_id)
            result.toggle_fold(sl.owner_id)
            assert result.slices == before

    def test_later_slices_shift(self):
        result = decorate(NESTED)
        f_line = next(sl for sl in result.slices if '"f"' in sl.text)
        old_number = f_line.line_number
        update = result.toggle_fold(node_id(result, '"b"'))
        assert update.delta == -8
        assert f_line.line_number == old_number - 8
        assert f_line in result.slices

    def test_earlier_slices_untouched(self):
        result = decorate(NESTED)
        head = result.slices[:3]
        result.toggle_fold(node_id(result, '"b"'))
        assert all(a is b for a, b in zip(head, result.slices[:3]))

    def test_folded_summary_keeps_comma(self):
        result = decorate(NESTED)
        result.toggle_fold(node_id(result, '"b"'))
        assert '    "b": {...},' in texts(result)

    def test_fold_from_closing_line_owner(self):
        result = decorate("[[1, 2], 3]")
        closing = result.slices[4]
        assert closing.text == "    ],"
        result.toggle_fold(closing.owner_id)
        assert texts(result) == ["[", "    [...],", "    3", "]"]

    def test_root_fold(self):
        result = decorate(NESTED)
        result.toggle_fold(0)
        assert texts(result) == ["{...}"]
        assert numbers(result) == [1]

    def test_nested_fold_state_survives_parent(self):
        result = decorate(NESTED)
        c_id = node_id(result, '"c"')
        b_id = node_id(result, '"b"')
        result.toggle_fold(c_id)
        result.toggle_fold(b_id)
        result.toggle_fold(b_id)
        assert '        "c": {...},' in texts(result)

    def test_toggle_hidden_node(self):
        result = decorate(NESTED)
        c_id = node_id(result, '"c"')
        b_id = node_id(result, '"b"')
        result.toggle_fold(b_id)
        before = list(result.slices)
        update = result.toggle_fold(c_id)
        assert not update.changed
        assert update.delta == 0
        assert result.slices == before
        assert result.is_collapsed(c_id)
        result.toggle_fold(b_id)
        assert '        "c": {...},' in texts(result)

    def test_numbering_contiguous_after_many_toggles(self):
        result = decorate(NESTED)
        ids = [sl.owner_id for sl in result.slices if sl.foldable]
        for i in ids[1:] + ids[::2]:
            result.toggle_fold(i)
            assert numbers(result) == list(range(1, len(result.slices) + 1))


class TestLocate:
    """Slice lookup walks the tree instead of scanning the slice list."""

    @staticmethod
    def scan(result, node_id):
        for i, sl in enumerate(result.slices):
            if sl.owner_id == node_id:
                return i
        return None

    def test_index_matches_scan_after_toggles(self):
        result = decorate(NESTED)
        foldable = [sl.owner_id for sl in result.slices if sl.foldable]
        for i in foldable[::-1] + foldable[1::2] + foldable[:2]:
            result.toggle_fold(i)
            for node in result.document.nodes:
                assert result._locate(node.id)[0] == self.scan(result, node.id)

    def test_path_lists_ancestors(self):
        result = decorate(NESTED)
        d_id = node_id(result, '"d"')
        _, path = result._locate(d_id)
        assert [n.key for n in path] == [None, '"b"', '"c"']

    def test_sizes_reset_by_bulk_folds(self):
        result = decorate(NESTED)
        b_id = node_id(result, '"b"')
        result.toggle_fold(node_id(result, '"a"'))
        assert result._sizes
        result.fold_all()
        assert not result._sizes
        update = result.toggle_fold(b_id)
        assert update.start == self.scan(result, b_id)

    def test_deep_nesting(self):
        depth = 3000
        result = decorate("[" * depth + "1" + "]" * depth, indent=1)
        assert len(result.slices) == 2 * depth + 1
        inner = depth - 1
        update = result.toggle_fold(inner)
        assert (update.start, update.stop, update.delta) == (inner, inner + 3, -2)
        assert result.slices[inner].text == " " * inner + "[...]"
        assert numbers(result) == list(range(1, len(result.slices) + 1))
        update = result.toggle_fold(inner - 1)
        assert update.start == inner - 1
        assert update.delta == -2


class TestFoldErrors:
    """Invalid toggles raise FoldError and change nothing."""

    @pytest.mark.parametrize("literal", ['"s"', "1", "true", "null"])
    def test_scalar_not_foldable(self, literal):
        result = decorate(f"[{literal}]")
        before = copy.deepcopy(result.slices)
        with pytest.raises(FoldError) as exc:
            result.toggle_fold(1)
        assert exc.value.node_id == 1
        assert result.slices == before

    def test_unknown_node(self):
        result = decorate("[1]")
        with pytest.raises(FoldError, match="unknown node"):
            result.toggle_fold(42)

    def test_empty_container(self):
        result = decorate('{"a": []}')
        with pytest.raises(FoldError, match="nothing to fold"):
            result.toggle_fold(1)

    def test_other_nodes_still_toggle(self):
        result = decorate('{"a": 1, "b": [2]}')
        with pytest.raises(FoldError):
            result.toggle_fold(1)
        result.toggle_fold(2)
        assert texts(result)[-2] == '    "b": [...]'


class TestBulkFolds:
    """fold_all / unfold_all / fold_to_depth."""

    def test_fold_all_keeps_root_open(self):
        result = decorate(NESTED)
        result.fold_all()
        assert texts(result) == [
            "{",
            '    "a": [...],',
            '    "b": {...},',
            '    "f": []',
            "}",
        ]

    def test_unfold_all(self):
        result = decorate(NESTED)
        expanded = copy.deepcopy(result.slices)
        result.fold_all()
        result.unfold_all()
        assert result.slices == expanded

    def test_fold_to_depth(self):
        result = decorate(NESTED)
        result.fold_to_depth(2)
        lines = texts(result)
        assert '        "c": {...},' in lines
        assert '    "a": [' in lines
        assert numbers(result) == list(range(1, len(lines) + 1))

    def test_toggle_after_fold_all(self):
        result = decorate(NESTED)
        result.fold_all()
        b_id = node_id(result, '"b"')
        result.toggle_fold(b_id)
        assert '        "c": {...},' in texts(result)
