import logging
import random
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple, Union

import config
from models.cell_model import Cell, encode_cell
from models.grid_errors import GridWriteError, InvalidArgumentError
from models.grid_model import GridData
from services.grid_file_service import GridFileService

logger = logging.getLogger(__name__)

# Printable ASCII without the cell delimiters
RANDOM_ALPHABET = "".join(chr(c) for c in range(33, 127) if chr(c) not in "(),")


class EditMode(Enum):
    KEY = "key"
    VALUE = "value"
    BOTH = "both"

    @classmethod
    def parse(cls, raw: Union[str, "EditMode"]) -> "EditMode":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise InvalidArgumentError(f"Invalid edit mode '{raw}'. Please use 'key', 'value', or 'both'.")


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: Union[str, "SortOrder"]) -> "SortOrder":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise InvalidArgumentError(f"Invalid sort order '{raw}'. Please use 'asc' or 'desc'.")


class SearchHit(NamedTuple):
    row: int
    column: int
    count: int


class GridController:
    def __init__(self, file_service=GridFileService, rng: Optional[random.Random] = None):
        self.grid = GridData()
        self.file_name: str | None = None
        self.file_service = file_service
        self.last_warning: str | None = None
        self._rng = rng or random.Random()

    # =========================================================================
    #  LOADING / PERSISTENCE
    # =========================================================================
    def load_file(self, path: str) -> GridData:
        self.last_warning = None
        grid = self.file_service.read_grid(path)
        self.grid = grid
        self.file_name = path
        if grid.row_count() == 0:
            self.last_warning = f"No rows found in {path}; the grid is empty."
        return grid

    def _persist(self):
        if not self.file_name:
            raise GridWriteError("No file associated with the grid; change kept in memory only.")
        try:
            self.file_service.write_grid(self.file_name, self.grid)
        except GridWriteError as e:
            # In-memory change stays applied
            logger.error("Persist failed: %s", e)
            raise

    # =========================================================================
    #  SEARCH
    # =========================================================================
    @staticmethod
    def count_occurrences(text: str, term: str) -> int:
        if not term:
            return 0
        occurrences = 0
        index = text.find(term)
        while index != -1:
            occurrences += 1
            index = text.find(term, index + 1)
        return occurrences

    def search(self, term: str) -> List[SearchHit]:
        self.last_warning = None
        if not term:
            raise InvalidArgumentError("Search term cannot be empty.")
        hits = []
        for r, c, cell in self.grid.iterate():
            count = self.count_occurrences(encode_cell(cell), term)
            if count > 0:
                hits.append(SearchHit(r, c, count))
        if not hits:
            self.last_warning = "No occurrences found in the grid."
        return hits

    # =========================================================================
    #  MUTATIONS
    # =========================================================================
    def edit_cell(self, row_index: int, column_index: int, new_key: str, new_value: str,
                  mode: Union[str, EditMode]) -> Cell:
        current = self.grid.get_cell(row_index, column_index)
        mode = EditMode.parse(mode)

        if mode is EditMode.KEY:
            updated = Cell(new_key, current.value)
        elif mode is EditMode.VALUE:
            updated = Cell(current.key, new_value)
        else:
            updated = Cell(new_key, new_value)

        self.grid.set_cell(row_index, column_index, updated)
        self._persist()
        return updated

    def add_row(self, cell_count: int) -> List[Cell]:
        self.grid.require_loaded()
        if cell_count <= 0:
            raise InvalidArgumentError("Number of cells must be positive. Please enter a number greater than 0.")
        row = [Cell("", "") for _ in range(cell_count)]
        self.grid.append_row(row)
        self._persist()
        return row

    def sort_row(self, row_index: int, order: Union[str, SortOrder]) -> List[Cell]:
        cells = self.grid.get_row(row_index)
        order = SortOrder.parse(order)
        # sorted() stays stable with reverse=True
        ordered = sorted(cells, key=encode_cell, reverse=order is SortOrder.DESC)
        self.grid.set_row(row_index, ordered)
        self._persist()
        return ordered

    def reset_table(self, rows: int, columns: int) -> GridData:
        limit = config.GRID_MAX_DIMENSION
        if rows <= 0 or columns <= 0:
            raise InvalidArgumentError("Dimensions must be greater than 0.")
        if rows > limit or columns > limit:
            raise InvalidArgumentError(f"Dimensions cannot exceed {limit}x{limit}.")

        new_rows = [[self._random_cell() for _ in range(columns)] for _ in range(rows)]
        self.grid.replace_all(new_rows)
        self.last_warning = None
        self._persist()
        return self.grid

    def _random_text(self) -> str:
        return "".join(self._rng.choice(RANDOM_ALPHABET) for _ in range(config.GRID_RANDOM_TEXT_LENGTH))

    def _random_cell(self) -> Cell:
        return Cell(self._random_text(), self._random_text())

    # =========================================================================
    #  PRESENTATION
    # =========================================================================
    def print_table(self) -> str:
        lines = []
        for row in self.grid.to_rows():
            lines.append("".join("{ " + encode_cell(cell) + " }" for cell in row))
        return "\n".join(lines)

    def get_table_rows(self) -> List[List[str]]:
        return [[encode_cell(cell) for cell in row] for row in self.grid.to_rows()]

    def filter_rows(self, term: str) -> List[Tuple[int, List[str]]]:
        """Encoded rows, with their index, that hold at least one cell matching term; every row if term is empty."""
        indexed = list(enumerate(self.get_table_rows()))
        if not term:
            return indexed
        return [(i, cells) for i, cells in indexed if any(self.count_occurrences(cell, term) for cell in cells)]

    # ========================================================
    #  EXCEL EXPORT
    # ========================================================
    def export_excel(self, filename: str):
        import pandas as pd

        rows = self.grid.to_rows()
        width = max((len(r) for r in rows), default=0)

        # 1. Grid as laid out on disk, short rows padded
        grid_cols = [f"Column {i}" for i in range(width)]
        grid_data = [[encode_cell(c) for c in r] + [""] * (width - len(r)) for r in rows]
        df_grid = pd.DataFrame(grid_data, columns=grid_cols)

        # 2. One line per cell
        df_cells = pd.DataFrame(
            [{'Row': r, 'Column': c, 'Key': cell.key, 'Value': cell.value} for r, c, cell in self.grid.iterate()],
            columns=['Row', 'Column', 'Key', 'Value']
        )

        try:
            with pd.ExcelWriter(filename, engine='openpyxl') as writer:
                df_grid.to_excel(writer, sheet_name=config.GRID_EXPORT_SHEET, index=False)
                df_cells.to_excel(writer, sheet_name='Cells', index=False)

                for sheet_name in writer.sheets:
                    sheet = writer.sheets[sheet_name]
                    for column in sheet.columns:
                        column = [cell for cell in column]
                        max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
                        sheet.column_dimensions[column[0].column_letter].width = max_length + 2
        except OSError as e:
            raise GridWriteError(f"Error exporting {filename}: {e}")

        logger.info("Exported %d rows to %s", len(rows), filename)
