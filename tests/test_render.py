"""Tests for per-cell rendering isolation, fitting, sorting and filtering."""

from __future__ import annotations

from termgrid.models import Align, Column, SortDirection, SortState
from termgrid.render import (
    CellRenderer,
    filter_items,
    fit_cell,
    render_cell,
    resolve_cell_value,
    sort_items,
)


class Upper:
    def render(self, value, item, row_index):
        return str(value).upper()


class Broken:
    def render(self, value, item, row_index):
        raise RuntimeError("renderer bug")


def explode(item):
    raise KeyError("missing")


# ---------------------------------------------------------------------------
# Cell values
# ---------------------------------------------------------------------------


class TestRenderCell:
    def test_mapping_and_attribute_values(self):
        column = Column("name", "Name")

        class Row:
            name = "attr"

        assert resolve_cell_value(column, {"name": "map"}) == "map"
        assert resolve_cell_value(column, Row()) == "attr"

    def test_get_value_wins(self):
        column = Column("name", "Name", get_value=lambda item: item["first"] + "!")
        assert render_cell(column, {"first": "ana"}, 0) == "ana!"

    def test_none_renders_empty(self):
        assert render_cell(Column("name", "Name"), {}, 0) == ""

    def test_custom_renderer(self):
        column = Column("name", "Name", render=Upper())
        assert isinstance(Upper(), CellRenderer)
        assert render_cell(column, {"name": "ana"}, 0) == "ANA"

    def test_failing_extractor_yields_fallback(self, telemetry_exporter):
        column = Column("name", "Name", get_value=explode)
        assert resolve_cell_value(column, {}, default="?") == "?"
        assert render_cell(column, {}, 3, fallback="-") == "-"
        spans = telemetry_exporter.get_finished_spans()
        assert [s.name for s in spans] == ["cell.extract", "cell.extract"]
        assert "cell.row" not in spans[0].attributes
        assert spans[1].attributes["cell.row"] == 3

    def test_failing_renderer_yields_fallback(self, telemetry_exporter, caplog):
        column = Column("name", "Name", render=Broken())
        with caplog.at_level("WARNING", logger="termgrid"):
            assert render_cell(column, {"name": "x"}, 5, fallback="!") == "!"
        assert "cell render failed column='name' row=5" in caplog.text
        (span,) = telemetry_exporter.get_finished_spans()
        assert span.name == "cell.render"
        assert span.attributes["cell.column"] == "name"

    def test_one_bad_row_does_not_affect_others(self):
        column = Column("n", "N", get_value=lambda item: 10 // item["n"])
        rows = [{"n": 1}, {"n": 0}, {"n": 5}]
        assert [render_cell(column, row, i) for i, row in enumerate(rows)] == [10, "", 2]


class TestFitCell:
    def test_pads_left_aligned(self):
        assert fit_cell("ab", 5) == "ab   "

    def test_right_and_center(self):
        assert fit_cell("ab", 5, Align.RIGHT) == "   ab"
        assert fit_cell("ab", 6, Align.CENTER) == "  ab  "

    def test_truncates_with_ellipsis(self):
        assert fit_cell("abcdefgh", 5) == "abcd…"

    def test_degenerate_widths(self):
        assert fit_cell("abc", 0) == ""
        assert fit_cell("abc", 1) == "a"

    def test_wide_characters_count_as_two_cells(self):
        assert fit_cell("日本", 5) == "日本 "


# ---------------------------------------------------------------------------
# Sorting and filtering
# ---------------------------------------------------------------------------


class TestSortItems:
    def test_no_sort_keeps_order(self, task_columns, task_items):
        assert sort_items(task_items, task_columns, None) == task_items

    def test_descending(self, task_columns, task_items):
        ordered = sort_items(task_items, task_columns, SortState("id", SortDirection.DESC))
        assert [item["id"] for item in ordered[:3]] == [25, 24, 23]

    def test_sort_value_override(self):
        rank = {"low": 0, "high": 1}
        column = Column("p", "P", get_sort_value=lambda item: rank[item["p"]])
        items = [{"p": "high"}, {"p": "low"}]
        assert sort_items(items, [column], SortState("p")) == [{"p": "low"}, {"p": "high"}]

    def test_missing_and_failing_values_sort_last(self):
        column = Column("v", "V", get_sort_value=lambda item: item["v"])
        items = [{"v": 2}, {}, {"v": None}, {"v": 1}]
        for direction in SortDirection:
            ordered = sort_items(items, [column], SortState("v", direction))
            assert ordered[2:] == [{}, {"v": None}]

    def test_mixed_types_fall_back_to_strings(self):
        column = Column("v", "V")
        ordered = sort_items([{"v": "b"}, {"v": 1}], [column], SortState("v"))
        assert ordered == [{"v": 1}, {"v": "b"}]

    def test_unknown_column_keeps_order(self, task_columns, task_items):
        assert sort_items(task_items, task_columns, SortState("nope")) == task_items


class TestFilterItems:
    def test_free_text_matches_any_column(self, task_columns, task_items):
        matched = filter_items(task_items, task_columns, text="task 0")
        assert [item["id"] for item in matched] == list(range(1, 10))

    def test_filter_values_or_within_key(self, task_columns, task_items):
        matched = filter_items(task_items, task_columns, filters={"status": ["done", "TODO"]})
        assert {item["status"] for item in matched} == {"done", "todo"}
        assert len(matched) == 17

    def test_text_and_filters_combine(self, task_columns, task_items):
        matched = filter_items(task_items, task_columns, "task 1", {"status": ["done"]})
        assert [item["id"] for item in matched] == [12, 15, 18]

    def test_filter_on_unknown_column_matches_nothing(self, task_columns, task_items):
        assert filter_items(task_items, task_columns, filters={"owner": ["ana"]}) == []

    def test_empty_search_keeps_everything(self, task_columns, task_items):
        assert filter_items(task_items, task_columns) == task_items
