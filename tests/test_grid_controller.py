import random
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import config
from controllers.grid_controller import (
    RANDOM_ALPHABET,
    EditMode,
    GridController,
    SearchHit,
    SortOrder,
)
from models.cell_model import Cell
from models.grid_errors import (
    GridIndexError,
    GridNotLoadedError,
    GridWriteError,
    InvalidArgumentError,
)
from services.grid_parser import parse_grid


class FailingFileService:
    @staticmethod
    def read_grid(path):
        return parse_grid("(a,1) (b,2)")

    @staticmethod
    def write_grid(path, grid):
        raise GridWriteError("disk full")


class GridControllerTestCase(unittest.TestCase):
    initial_text = "(foo,1) (bar,2)\n(baz,foo)"

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "grid.txt"
        self.path.write_text(self.initial_text, encoding="utf-8")
        self.controller = GridController(rng=random.Random(7))
        self.controller.load_file(str(self.path))

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def saved_text(self) -> str:
        return self.path.read_text(encoding="utf-8")


class CountOccurrencesTests(unittest.TestCase):
    def test_overlapping_matches_are_counted(self) -> None:
        self.assertEqual(GridController.count_occurrences("aaa", "aa"), 2)
        self.assertEqual(GridController.count_occurrences("aaaa", "a"), 4)

    def test_no_match_or_empty_term(self) -> None:
        self.assertEqual(GridController.count_occurrences("abc", "x"), 0)
        self.assertEqual(GridController.count_occurrences("abc", ""), 0)
        self.assertEqual(GridController.count_occurrences("", "a"), 0)


class UninitializedControllerTests(unittest.TestCase):
    def test_operations_require_a_loaded_grid(self) -> None:
        controller = GridController()
        with self.assertRaises(GridNotLoadedError):
            controller.search("x")
        with self.assertRaises(GridNotLoadedError):
            controller.edit_cell(0, 0, "k", "v", "both")
        with self.assertRaises(GridNotLoadedError):
            controller.add_row(1)
        with self.assertRaises(GridNotLoadedError):
            controller.sort_row(0, "asc")
        with self.assertRaises(GridNotLoadedError):
            controller.print_table()

    def test_reset_loads_grid_but_needs_a_file_to_persist(self) -> None:
        controller = GridController(rng=random.Random(1))
        with self.assertRaises(GridWriteError):
            controller.reset_table(2, 2)
        self.assertTrue(controller.grid.is_loaded)
        self.assertEqual(controller.grid.row_count(), 2)


class SearchTests(GridControllerTestCase):
    def test_search_reports_each_matching_cell(self) -> None:
        hits = self.controller.search("foo")
        self.assertEqual(hits, [SearchHit(0, 0, 1), SearchHit(1, 0, 1)])
        self.assertIsNone(self.controller.last_warning)

    def test_search_covers_the_encoded_form(self) -> None:
        hits = self.controller.search("o,")
        self.assertEqual(hits, [SearchHit(0, 0, 1)])
        hits = self.controller.search("(")
        self.assertEqual(len(hits), 3)

    def test_search_without_matches_sets_warning(self) -> None:
        self.assertEqual(self.controller.search("zzz"), [])
        self.assertEqual(self.controller.last_warning, "No occurrences found in the grid.")

    def test_empty_term_is_rejected(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            self.controller.search("")


class EditCellTests(GridControllerTestCase):
    def test_key_mode_changes_only_key(self) -> None:
        self.controller.edit_cell(0, 1, "qux", "ignored", "key")
        self.assertEqual(self.controller.grid.get_cell(0, 1), Cell("qux", "2"))
        self.assertEqual(self.saved_text(), "(foo,1) (qux,2)\n(baz,foo)")

    def test_value_mode_changes_only_value(self) -> None:
        self.controller.edit_cell(1, 0, "ignored", "9", EditMode.VALUE)
        self.assertEqual(self.controller.grid.get_cell(1, 0), Cell("baz", "9"))

    def test_both_mode_changes_both(self) -> None:
        self.controller.edit_cell(0, 0, "k", "v", "BOTH")
        self.assertEqual(self.controller.grid.get_cell(0, 0), Cell("k", "v"))

    def test_invalid_mode_leaves_grid_untouched(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            self.controller.edit_cell(0, 0, "k", "v", "everything")
        self.assertEqual(self.controller.grid.get_cell(0, 0), Cell("foo", "1"))
        self.assertEqual(self.saved_text(), self.initial_text)

    def test_out_of_range_leaves_grid_untouched(self) -> None:
        for r, c in [(2, 0), (1, 1), (-1, 0)]:
            with self.subTest(r=r, c=c):
                with self.assertRaises(GridIndexError):
                    self.controller.edit_cell(r, c, "k", "v", "both")
        self.assertEqual(self.saved_text(), self.initial_text)


class AddRowTests(GridControllerTestCase):
    def test_add_row_appends_empty_cells(self) -> None:
        before = self.controller.grid.row_count()
        row = self.controller.add_row(3)
        self.assertEqual(self.controller.grid.row_count(), before + 1)
        self.assertEqual(self.controller.grid.column_count(before), 3)
        self.assertEqual(row, [Cell("", "")] * 3)
        self.assertEqual(self.saved_text(), self.initial_text + "\n(,) (,) (,)")

    def test_non_positive_count_is_rejected(self) -> None:
        for count in (0, -2):
            with self.subTest(count=count):
                with self.assertRaises(InvalidArgumentError):
                    self.controller.add_row(count)
        self.assertEqual(self.controller.grid.row_count(), 2)

    def test_added_row_survives_reload(self) -> None:
        self.controller.add_row(2)
        reloaded = GridController()
        reloaded.load_file(str(self.path))
        self.assertEqual(reloaded.grid.column_count(2), 2)


class SortRowTests(GridControllerTestCase):
    initial_text = "(b,2) (a,9) (c,1) (a,1)\n(z,z)"

    def test_ascending_sort_by_encoded_cell(self) -> None:
        ordered = self.controller.sort_row(0, "asc")
        self.assertEqual(ordered, [Cell("a", "1"), Cell("a", "9"), Cell("b", "2"), Cell("c", "1")])
        self.assertEqual(self.saved_text(), "(a,1) (a,9) (b,2) (c,1)\n(z,z)")

    def test_descending_reverses_ascending(self) -> None:
        ordered = self.controller.sort_row(0, SortOrder.DESC)
        self.assertEqual(ordered, [Cell("c", "1"), Cell("b", "2"), Cell("a", "9"), Cell("a", "1")])

    def test_sort_is_idempotent_and_reversible(self) -> None:
        first = self.controller.sort_row(0, "asc")
        self.assertEqual(self.controller.sort_row(0, "asc"), first)
        self.controller.sort_row(0, "desc")
        self.assertEqual(self.controller.sort_row(0, "asc"), first)

    def test_sort_keeps_duplicates(self) -> None:
        self.controller.grid.set_row(1, [Cell("x", "1"), Cell("x", "1"), Cell("a", "0")])
        self.assertEqual(self.controller.sort_row(1, "asc"), [Cell("a", "0"), Cell("x", "1"), Cell("x", "1")])

    def test_invalid_row_or_order(self) -> None:
        with self.assertRaises(GridIndexError):
            self.controller.sort_row(5, "asc")
        with self.assertRaises(InvalidArgumentError):
            self.controller.sort_row(0, "sideways")
        self.assertEqual(self.saved_text(), self.initial_text)


class ResetTableTests(GridControllerTestCase):
    def test_reset_builds_rectangular_random_grid(self) -> None:
        self.controller.reset_table(3, 4)
        grid = self.controller.grid
        self.assertEqual(grid.row_count(), 3)
        for r in range(3):
            self.assertEqual(grid.column_count(r), 4)
        for _, _, cell in grid.iterate():
            self.assertEqual(len(cell.key), config.GRID_RANDOM_TEXT_LENGTH)
            self.assertEqual(len(cell.value), config.GRID_RANDOM_TEXT_LENGTH)
            self.assertTrue(set(cell.key + cell.value) <= set(RANDOM_ALPHABET))

    def test_reset_is_persisted_and_reparses_identically(self) -> None:
        self.controller.reset_table(2, 5)
        self.assertEqual(parse_grid(self.saved_text()).to_rows(), self.controller.grid.to_rows())

    def test_invalid_dimensions_are_rejected(self) -> None:
        for rows, columns in [(0, 1), (1, 0), (-1, 3)]:
            with self.subTest(rows=rows, columns=columns):
                with self.assertRaises(InvalidArgumentError):
                    self.controller.reset_table(rows, columns)
        with mock.patch.object(config, "GRID_MAX_DIMENSION", 5):
            with self.assertRaises(InvalidArgumentError):
                self.controller.reset_table(6, 1)
        self.assertEqual(self.saved_text(), self.initial_text)

    def test_alphabet_excludes_cell_delimiters(self) -> None:
        for ch in "(),":
            self.assertNotIn(ch, RANDOM_ALPHABET)
        self.assertNotIn(" ", RANDOM_ALPHABET)


class PrintTableTests(GridControllerTestCase):
    def test_print_wraps_each_cell(self) -> None:
        self.assertEqual(
            self.controller.print_table(),
            "{ (foo,1) }{ (bar,2) }\n{ (baz,foo) }",
        )

    def test_print_has_no_side_effects(self) -> None:
        before = self.controller.grid.to_rows()
        self.controller.print_table()
        self.assertEqual(self.controller.grid.to_rows(), before)
        self.assertEqual(self.saved_text(), self.initial_text)

    def test_filter_rows_keeps_rows_with_a_match(self) -> None:
        self.assertEqual(self.controller.filter_rows("bar"), [(0, ["(foo,1)", "(bar,2)"])])
        self.assertEqual(
            self.controller.filter_rows("foo"),
            [(0, ["(foo,1)", "(bar,2)"]), (1, ["(baz,foo)"])],
        )
        self.assertEqual(self.controller.filter_rows("zzz"), [])

    def test_filter_rows_without_term_returns_every_row(self) -> None:
        self.assertEqual(
            self.controller.filter_rows(""),
            [(0, ["(foo,1)", "(bar,2)"]), (1, ["(baz,foo)"])],
        )


class PersistenceFailureTests(unittest.TestCase):
    def test_failed_save_keeps_in_memory_change(self) -> None:
        controller = GridController(file_service=FailingFileService)
        controller.load_file("ignored.txt")
        with self.assertRaises(GridWriteError):
            controller.edit_cell(0, 0, "new", "", "key")
        self.assertEqual(controller.grid.get_cell(0, 0), Cell("new", "1"))


class LoadFileTests(unittest.TestCase):
    def test_empty_file_loads_with_warning(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "empty.txt"
            path.write_text("", encoding="utf-8")
            controller = GridController()
            controller.load_file(str(path))
            self.assertTrue(controller.grid.is_loaded)
            self.assertEqual(controller.grid.row_count(), 0)
            self.assertIsNotNone(controller.last_warning)


class ExportExcelTests(GridControllerTestCase):
    def test_export_writes_grid_and_cell_sheets(self) -> None:
        import openpyxl

        target = Path(self._tmp.name) / "grid.xlsx"
        self.controller.export_excel(str(target))
        wb = openpyxl.load_workbook(target)
        self.assertEqual(wb.sheetnames, [config.GRID_EXPORT_SHEET, "Cells"])

        ws = wb[config.GRID_EXPORT_SHEET]
        self.assertEqual(ws["A1"].value, "Column 0")
        self.assertEqual(ws["B1"].value, "Column 1")
        self.assertEqual(ws["A2"].value, "(foo,1)")
        self.assertEqual(ws["B2"].value, "(bar,2)")
        self.assertEqual(ws["A3"].value, "(baz,foo)")

        cells = wb["Cells"]
        self.assertEqual([c.value for c in cells[1]], ["Row", "Column", "Key", "Value"])
        self.assertEqual([c.value for c in cells[4]], [1, 0, "baz", "foo"])
        self.assertEqual(self.saved_text(), self.initial_text)


if __name__ == "__main__":
    unittest.main()
