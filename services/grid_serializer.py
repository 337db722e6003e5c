from models.cell_model import encode_cell
from models.grid_model import GridData


def serialize_row(row) -> str:
    return " ".join(encode_cell(cell) for cell in row)


def serialize_grid(grid: GridData) -> str:
    # No trailing newline after the last row
    return "\n".join(serialize_row(row) for row in grid.to_rows())
