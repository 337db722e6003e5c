import logging
import os
import shutil
from typing import Optional

import config
from models.grid_errors import (
    GridFileNotFoundError,
    GridFileNotReadableError,
    GridServiceError,
    GridWriteError,
)
from models.grid_model import GridData
from services.grid_parser import parse_grid
from services.grid_serializer import serialize_grid

logger = logging.getLogger(__name__)

# Shipped as package data next to this module
BUNDLED_RESOURCE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "resources", "default.txt")


class GridFileService:
    """
    Reads and writes grid files.
    - Tries several encodings on load (UTF-8 with or without BOM, cp1252, Latin-1).
      Latin-1 decodes any byte sequence, so it goes last.
    - Always saves as config.GRID_FILE_ENCODING: a file read through the cp1252
      or Latin-1 fallback is rewritten as UTF-8 on the next save.
    - Seeds the default file from the bundled template when it is missing.
    """

    ENCODINGS = ['utf-8-sig', 'utf-8', 'cp1252', 'latin-1']

    @staticmethod
    def resolve_file_name(argument: Optional[str]) -> str:
        if argument is None:
            GridFileService.ensure_default_file()
            return config.GRID_DEFAULT_FILE

        if not argument.strip():
            raise GridServiceError("Filename cannot be empty.")

        if not GridFileService.file_exists(argument):
            raise GridFileNotFoundError(f"File '{argument}' not found or not readable.")
        return argument

    @staticmethod
    def file_exists(path: str) -> bool:
        return os.path.isfile(path) and os.access(path, os.R_OK)

    @staticmethod
    def ensure_default_file(path: Optional[str] = None, resource: Optional[str] = None) -> str:
        path = path or config.GRID_DEFAULT_FILE
        resource = resource or config.GRID_DEFAULT_RESOURCE or BUNDLED_RESOURCE
        if os.path.exists(path):
            return path
        if not os.path.isfile(resource):
            raise GridFileNotFoundError(f"{os.path.basename(resource)} not found in resources.")
        try:
            shutil.copyfile(resource, path)
        except OSError as e:
            raise GridWriteError(f"Could not create '{path}': {e}")
        logger.info("Seeded %s from %s", path, resource)
        return path

    @staticmethod
    def load_text(path: str) -> str:
        if not os.path.exists(path):
            raise GridFileNotFoundError(f"{path} not found.")
        if not os.path.isfile(path):
            raise GridFileNotReadableError(f"{path} is not a regular file.")

        # 1. Try each encoding in turn
        for enc in GridFileService.ENCODINGS:
            try:
                with open(path, "r", encoding=enc, newline="") as f:
                    text = f.read()
                logger.debug("Read %s as %s", path, enc)
                return text
            except UnicodeDecodeError:
                continue
            except OSError as e:
                raise GridFileNotReadableError(f"Read error on {path}: {e}")

        # 2. Nothing decoded
        raise GridFileNotReadableError(f"Could not decode {path} (check its encoding).")

    @staticmethod
    def save_text(path: str, text: str):
        try:
            with open(path, "w", encoding=config.GRID_FILE_ENCODING, newline="") as f:
                f.write(text)
        except OSError as e:
            raise GridWriteError(f"Error saving {path}: {e}")
        logger.info("Saved %s (%d chars)", path, len(text))

    @staticmethod
    def read_grid(path: str) -> GridData:
        grid = parse_grid(GridFileService.load_text(path))
        logger.info("Loaded %s with %d rows", path, grid.row_count())
        return grid

    @staticmethod
    def write_grid(path: str, grid: GridData):
        GridFileService.save_text(path, serialize_grid(grid))
