from dataclasses import dataclass

from models.grid_errors import CellFormatError


@dataclass(frozen=True)
class Cell:
    """
    A single (key,value) pair. Either side may be empty.
    """
    key: str = ""
    value: str = ""

    def __str__(self):
        return encode_cell(self)


def encode_cell(cell: Cell) -> str:
    return "(" + cell.key + "," + cell.value + ")"


def decode_cell(token: str) -> Cell:
    if len(token) < 3 or not token.startswith("(") or not token.endswith(")"):
        raise CellFormatError(f"Malformed cell token: {token!r}")
    comma = token.find(",", 1)
    if comma == -1 or comma > len(token) - 2:
        raise CellFormatError(f"Cell token without separator: {token!r}")
    return Cell(key=token[1:comma], value=token[comma + 1:-1])
