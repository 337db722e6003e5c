import logging
from typing import List

from models.cell_model import Cell, decode_cell
from models.grid_model import GridData

logger = logging.getLogger(__name__)


def split_lines(text: str) -> List[str]:
    lines = text.split("\n")
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def scan_line(line: str) -> List[Cell]:
    """
    Extracts every "(key,value)" token of a line, left to right.
    A token is "(", any run without ",", ",", any run without ")", ")".
    Text between tokens is ignored.
    """
    cells = []
    i = 0
    n = len(line)
    while i < n:
        if line[i] == "(":
            comma = line.find(",", i + 1)
            if comma == -1:
                break
            close = line.find(")", comma + 1)
            if close == -1:
                break
            cells.append(decode_cell(line[i:close + 1]))
            i = close + 1
            continue
        i += 1
    return cells


def parse_grid(text: str) -> GridData:
    grid = GridData()

    if not text:
        logger.info("File is empty, returning empty grid.")
        grid.replace_all([])
        return grid

    rows = []
    for line_number, line in enumerate(split_lines(text)):
        cells = scan_line(line)
        if not cells:
            logger.debug("Line %d has no cells, skipped.", line_number)
            continue
        rows.append(cells)

    grid.replace_all(rows)
    return grid
