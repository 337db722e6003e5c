import os


# Grid file defaults
GRID_DEFAULT_FILE: str = os.environ.get("GRID_DEFAULT_FILE", "default.txt")
GRID_FILE_ENCODING: str = os.environ.get("GRID_FILE_ENCODING", "utf-8")
# Template used to seed GRID_DEFAULT_FILE when it is missing; empty means the bundled services/resources/default.txt
GRID_DEFAULT_RESOURCE: str = os.environ.get("GRID_DEFAULT_RESOURCE", "")


# Reset / generation
GRID_MAX_DIMENSION: int = int(os.environ.get("GRID_MAX_DIMENSION", "100"))
GRID_RANDOM_TEXT_LENGTH: int = int(os.environ.get("GRID_RANDOM_TEXT_LENGTH", "3"))


# Logging
GRID_LOG_LEVEL: str = os.environ.get("GRID_LOG_LEVEL", "WARNING").upper()


# Spreadsheet export
GRID_EXPORT_SHEET: str = os.environ.get("GRID_EXPORT_SHEET", "Grid")
