from typing import Iterator, List, Optional, Tuple

from models.cell_model import Cell
from models.grid_errors import GridIndexError, GridNotLoadedError


class GridData:
    """
    Represents the grid in memory:
      - rows: list of lists of Cell (rows may differ in length after parsing)
      - loaded: False until a file is parsed or the table is reset
    """
    def __init__(self, rows: Optional[List[List[Cell]]] = None):
        self._rows: List[List[Cell]] = []
        self._loaded = False
        if rows is not None:
            self.replace_all(rows)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def require_loaded(self):
        if not self._loaded:
            raise GridNotLoadedError()

    def _check_row(self, row_index: int):
        if not 0 <= row_index < len(self._rows):
            raise GridIndexError(f"Invalid row index {row_index} (rows: {len(self._rows)}).")

    def _check_cell(self, row_index: int, column_index: int):
        self._check_row(row_index)
        size = len(self._rows[row_index])
        if not 0 <= column_index < size:
            raise GridIndexError(f"Invalid column index {column_index} for row {row_index} (columns: {size}).")

    # --- QUERIES ---
    def row_count(self) -> int:
        self.require_loaded()
        return len(self._rows)

    def column_count(self, row_index: int) -> int:
        self.require_loaded()
        self._check_row(row_index)
        return len(self._rows[row_index])

    def get_cell(self, row_index: int, column_index: int) -> Cell:
        self.require_loaded()
        self._check_cell(row_index, column_index)
        return self._rows[row_index][column_index]

    def get_row(self, row_index: int) -> List[Cell]:
        self.require_loaded()
        self._check_row(row_index)
        return list(self._rows[row_index])

    def iterate(self) -> Iterator[Tuple[int, int, Cell]]:
        # Row-major; every call starts a fresh traversal
        self.require_loaded()
        return ((r, c, cell) for r, row in enumerate(self._rows) for c, cell in enumerate(row))

    def to_rows(self) -> List[List[Cell]]:
        self.require_loaded()
        return [list(row) for row in self._rows]

    # --- MUTATION ---
    def set_cell(self, row_index: int, column_index: int, cell: Cell):
        self.require_loaded()
        self._check_cell(row_index, column_index)
        self._rows[row_index][column_index] = cell

    def set_row(self, row_index: int, cells: List[Cell]):
        self.require_loaded()
        self._check_row(row_index)
        self._rows[row_index] = list(cells)

    def append_row(self, row: List[Cell]):
        self.require_loaded()
        self._rows.append(list(row))

    def replace_all(self, rows: List[List[Cell]]):
        self._rows = [list(row) for row in rows]
        self._loaded = True
