class GridError(Exception):
    """Base class for every error raised by the grid engine."""
    pass


class GridNotLoadedError(GridError):
    def __init__(self, message="No grid loaded. Load a file or reset the table first."):
        super().__init__(message)


class GridIndexError(GridError):
    pass


class InvalidArgumentError(GridError):
    pass


class CellFormatError(GridError):
    pass


# --- STORAGE ---
class GridServiceError(GridError):
    pass


class GridFileNotFoundError(GridServiceError):
    pass


class GridFileNotReadableError(GridServiceError):
    pass


class GridWriteError(GridServiceError):
    pass
