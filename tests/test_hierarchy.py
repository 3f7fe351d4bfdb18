"""Tests for parent/child navigation."""

import pytest
from jismeshcode.coordinate import Coordinate
from jismeshcode.errors import CannotRefineError, UnrelatedLevelError
from jismeshcode.hierarchy import ancestors, children, parent, to_level
from jismeshcode.levels import MeshLevel
from jismeshcode.meshcode import MeshCode


def code(text, level=None):
    return MeshCode.from_string(text, level=level)


@pytest.fixture
def tokyo_codes():
    """Tokyo Station encoded at every level."""
    point = Coordinate(35.6812, 139.7671)
    return [MeshCode.from_coordinate(point, level) for level in MeshLevel]


class TestParent:
    """Tests for parent()."""

    def test_third_to_second(self):
        assert parent(code("53394611")) == code("533946")

    def test_chain_to_first(self):
        second = parent(code("53393599"))
        assert second == code("533935")
        assert second.level is MeshLevel.SECOND
        first = parent(second)
        assert first == code("5339")
        assert parent(first) is None

    def test_fourth_levels(self):
        assert parent(code("53394611323")) == code("5339461132")
        assert parent(code("5339461132")) == code("533946113")
        assert parent(code("533946113")) == code("53394611")

    def test_fifth_to_third(self):
        assert parent(code("5339461173")) == code("53394611")

    def test_parent_contains_child(self, tokyo_codes):
        for child in tokyo_codes:
            up = parent(child)
            if up is None:
                continue
            assert up.contains(child.center())

    def test_ancestors(self):
        assert ancestors(code("5339461173")) == [
            code("53394611"),
            code("533946"),
            code("5339"),
        ]
        assert ancestors(code("5339")) == []


class TestChildren:
    """Tests for children()."""

    def test_first_level_has_64(self):
        result = children(code("5339"))
        assert len(result) == 64
        assert all(c.level is MeshLevel.SECOND for c in result)

    def test_second_level_has_100(self):
        result = children(code("533946"))
        assert len(result) == 100
        assert all(c.level is MeshLevel.THIRD for c in result)
        assert result.count(code("53394611")) == 1

    def test_third_level_splits_into_halves(self):
        result = children(code("53394611"))
        assert [str(c) for c in result] == [
            "533946111",
            "533946112",
            "533946113",
            "533946114",
        ]

    def test_quarter_and_eighth(self):
        assert len(children(code("533946113"))) == 4
        assert len(children(code("5339461132"))) == 4
        assert children(code("53394611323")) == []

    def test_fifth_is_finest(self):
        assert children(code("5339461173")) == []

    def test_explicit_fifth_children(self):
        result = children(code("53394611"), level=MeshLevel.FIFTH)
        assert len(result) == 100
        assert str(result[0]) == "5339461100"
        assert str(result[-1]) == "5339461199"
        assert result.count(code("5339461173")) == 1

    def test_unrelated_child_level(self):
        with pytest.raises(UnrelatedLevelError):
            children(code("5339"), level=MeshLevel.THIRD)
        with pytest.raises(UnrelatedLevelError):
            children(code("533946113"), level=MeshLevel.FIFTH)

    def test_row_major_order(self):
        result = children(code("5339"))
        keys = [(c.row, c.column) for c in result]
        assert keys == sorted(keys)
        assert str(result[0]) == "533900"
        assert str(result[1]) == "533901"
        assert str(result[8]) == "533910"
        assert str(result[-1]) == "533977"

    def test_children_tile_parent(self):
        """Children cover exactly the parent's cell."""
        whole = code("533946").bounds()
        parts = [c.bounds() for c in children(code("533946"))]
        assert min(b.min_lat for b in parts) == pytest.approx(whole.min_lat)
        assert max(b.max_lat for b in parts) == pytest.approx(whole.max_lat)
        assert min(b.min_lon for b in parts) == pytest.approx(whole.min_lon)
        assert max(b.max_lon for b in parts) == pytest.approx(whole.max_lon)

    def test_edge_cell_keeps_children_inside_extent(self):
        """Only the south-west corner of the north-east-most cell is inside the extent."""
        assert children(code("6954")) == [code("695400")]

    def test_parent_children_law(self, tokyo_codes):
        for child in tokyo_codes:
            up = parent(child)
            if up is None:
                continue
            siblings = children(up, level=child.level)
            assert siblings.count(child) == 1
            assert len(siblings) == child.level.subdivision_factor() ** 2

    def test_default_children_skip_fifth_level(self):
        fifth = code("5339461173")
        up = parent(fifth)
        assert fifth not in children(up)
        assert all(c.level is MeshLevel.FOURTH_HALF for c in children(up))
        assert fifth in children(up, level=MeshLevel.FIFTH)

    def test_default_children_contain_main_chain_codes(self, tokyo_codes):
        for child in tokyo_codes:
            up = parent(child)
            if up is None or child.level is MeshLevel.FIFTH:
                continue
            assert children(up).count(child) == 1


class TestToLevel:
    """Tests for to_level()."""

    def test_to_coarser_levels(self):
        mesh = code("53393599")
        assert to_level(mesh, MeshLevel.SECOND) == code("533935")
        assert to_level(mesh, MeshLevel.FIRST) == code("5339")

    def test_same_level(self):
        mesh = code("53393599")
        assert to_level(mesh, MeshLevel.THIRD) is mesh

    def test_fourth_chain(self):
        eighth = code("53394611323")
        assert to_level(eighth, MeshLevel.FOURTH_HALF) == code("533946113")
        assert to_level(eighth, MeshLevel.THIRD) == code("53394611")

    def test_fifth_to_third(self):
        assert to_level(code("5339461173"), MeshLevel.THIRD) == code("53394611")

    def test_matches_direct_encoding(self, tokyo_codes):
        point = Coordinate(35.6812, 139.7671)
        for mesh in tokyo_codes:
            for target in mesh.level.ancestors():
                assert to_level(mesh, target) == MeshCode.from_coordinate(point, target)

    @pytest.mark.parametrize(
        "text,target",
        [
            ("5339", MeshLevel.SECOND),
            ("533946", MeshLevel.FIFTH),
            ("53394611", MeshLevel.FOURTH_HALF),
            ("53394611", MeshLevel.FIFTH),
            ("533946113", MeshLevel.FIFTH),
            ("53394611323", MeshLevel.FIFTH),
        ],
    )
    def test_cannot_refine(self, text, target):
        with pytest.raises(CannotRefineError):
            to_level(code(text), target)

    def test_refine_always_rejected(self, tokyo_codes):
        for mesh in tokyo_codes:
            for target in MeshLevel:
                if target.is_finer_than(mesh.level):
                    with pytest.raises(CannotRefineError):
                        to_level(mesh, target)

    @pytest.mark.parametrize(
        "target",
        [MeshLevel.FOURTH_HALF, MeshLevel.FOURTH_QUARTER, MeshLevel.FOURTH_EIGHTH],
    )
    def test_unrelated_branches(self, target):
        with pytest.raises(UnrelatedLevelError):
            to_level(code("5339461173"), target)
