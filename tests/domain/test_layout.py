"""Tests for invoicegrid.domain.layout."""

from invoicegrid.domain.layout import (
    Placement,
    calculate_content_rows,
    calculate_list_rows,
    section_geometry,
)
from invoicegrid.template.model import (
    FieldElement,
    ListElement,
    Section,
    StaticTextElement,
)


def _list(**kwargs) -> ListElement:
    """Create a list element over `items`."""
    data = {
        "type": "list",
        "name": "items",
        "content": [
            {"type": "field", "name": "description"},
            {"type": "field", "name": "total_price"},
        ],
    }
    data.update(kwargs)
    return ListElement.model_validate(data)


def _data(*categories) -> dict:
    """Create invoice data with one item per category."""
    return {"items": [{"category": c, "total_price": 1} for c in categories]}


class TestCalculateListRows:
    """Test suite for the `calculate_list_rows` function."""

    def test_ungrouped(self):
        """Test one header row plus one row per item."""
        assert calculate_list_rows(_list(), _data("A", "B")) == 3

    def test_ungrouped_with_aggregation(self):
        """Test that an aggregation reserves an extra row."""
        element = _list(aggregation="sum", aggregationField="total_price")
        assert calculate_list_rows(element, _data("A", "B")) == 4

    def test_item_spanning_rows(self):
        """Test that item templates spanning rows enlarge every item."""
        element = _list(
            content=[
                {"type": "field", "name": "description"},
                {
                    "type": "field",
                    "name": "notes",
                    "position": {"column": 1, "row": 2},
                    "span": {"columnSpan": 12, "rowSpan": 2},
                },
            ]
        )
        assert calculate_list_rows(element, _data("A", "B")) == 1 + 2 * 3

    def test_grouped(self):
        """Test one header row per group plus one row per item."""
        element = _list(groupBy="category")
        assert calculate_list_rows(element, _data("A", "B", "A")) == 5

    def test_grouped_with_aggregation(self):
        """Test that grouped lists add only the aggregation row."""
        element = _list(groupBy="category", aggregation="count")
        assert calculate_list_rows(element, _data("A", "B", "A")) == 6

    def test_missing_array(self):
        """Test that a missing or non-array source contributes no rows."""
        assert calculate_list_rows(_list(), {}) == 0
        assert calculate_list_rows(_list(), {"items": "nope"}) == 0


class TestCalculateContentRows:
    """Test suite for the `calculate_content_rows` function."""

    def test_positioned_elements_use_max_extent(self):
        """Test that the largest row extent wins, not the sum."""
        content = [
            FieldElement.model_validate(
                {"name": "a", "position": {"column": 1, "row": 1}}
            ),
            FieldElement.model_validate(
                {
                    "name": "b",
                    "position": {"column": 2, "row": 3},
                    "span": {"columnSpan": 1, "rowSpan": 2},
                }
            ),
        ]
        assert calculate_content_rows(content, {}) == 5

    def test_unpositioned_elements_count_one(self):
        """Test that elements without a position occupy one row."""
        content = [StaticTextElement(content="Thanks")]
        assert calculate_content_rows(content, {}) == 1

    def test_lists_without_position(self):
        """Test that unpositioned lists use the list row calculation."""
        content = [StaticTextElement(content="x"), _list()]
        assert calculate_content_rows(content, _data("A", "B", "C")) == 4

    def test_positioned_list_uses_position(self):
        """Test that an explicit position overrides the list calculation."""
        element = _list(position={"column": 1, "row": 2})
        assert calculate_content_rows([element], _data("A", "B", "C")) == 3

    def test_empty_content(self):
        """Test that an empty section has no content rows."""
        assert calculate_content_rows([], {}) == 0


class TestSectionGeometry:
    """Test suite for the `section_geometry` function."""

    def _section(self, section_type: str, min_rows: int) -> Section:
        return Section.model_validate(
            {
                "type": section_type,
                "grid": {"columns": 12, "minRows": min_rows},
                "content": [
                    {
                        "type": "field",
                        "name": "total",
                        "position": {"column": 1, "row": 1},
                    }
                ],
            }
        )

    def test_min_rows_is_a_floor(self):
        """Test that actual rows never drop below minRows."""
        geometry = section_geometry(self._section("items", 5), {})
        assert geometry.content_rows == 2
        assert geometry.actual_rows == 5
        assert geometry.filler_rows == 3

    def test_content_exceeds_min_rows(self):
        """Test that content rows are never truncated."""
        geometry = section_geometry(self._section("header", 1), {})
        assert geometry.actual_rows == 2
        assert geometry.filler_rows == 0

    def test_summary_has_no_filler(self):
        """Test that summary sections keep the floor but get no filler."""
        geometry = section_geometry(self._section("summary", 5), {})
        assert geometry.actual_rows == 5
        assert geometry.filler_rows == 0


class TestPlacement:
    """Test suite for the `Placement` defaults."""

    def test_defaults(self):
        """Test that placement defaults to column 1, row 1, span 1x1."""
        assert Placement.of(None, None) == Placement(1, 1, 1, 1)
