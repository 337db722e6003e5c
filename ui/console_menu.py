import re
from typing import Callable

from controllers.grid_controller import EditMode, GridController, SortOrder
from models.grid_errors import GridError, GridServiceError

POSITION_FORMAT = re.compile(r"\d+,\d+")
DIMENSIONS_FORMAT = re.compile(r"\d+x\d+")

MENU_ENTRIES = [
    ("search", "Search"),
    ("edit", "Edit"),
    ("print", "Print"),
    ("add_row", "Add Row"),
    ("sort", "Sort"),
    ("reset", "Reset"),
    ("view", "View in window"),
    ("export", "Export to Excel"),
    ("x", "Exit"),
]


class ConsoleMenu:
    """
    Text menu over a GridController. input_func/output_func default to the console.
    """

    def __init__(self, controller: GridController, input_func: Callable[[str], str] = input,
                 output_func: Callable[[str], None] = print):
        self.controller = controller
        self.input_func = input_func
        self.output = output_func
        self.commands = {
            "search": self.handle_search,
            "edit": self.handle_edit,
            "print": self.handle_print,
            "add_row": self.handle_add_row,
            "sort": self.handle_sort,
            "reset": self.handle_reset,
            "view": self.handle_view,
            "export": self.handle_export,
        }

    def ask(self, prompt: str) -> str:
        return self.input_func(prompt).strip()

    def run_task(self, func):
        try:
            func()
        except GridServiceError as e:
            self.output(f"Error saving: {e}")
        except GridError as e:
            self.output(str(e))

    def display_menu(self):
        while True:
            self.output("\n=== MENU ===")
            for command, label in MENU_ENTRIES:
                self.output(f"[ {command} ] - {label}")
            try:
                choice = self.ask("Choose an action: ").lower()
            except EOFError:
                break

            if choice == "x":
                break
            handler = self.commands.get(choice)
            if handler is None:
                self.output("Invalid action. Please try again.")
                continue
            self.run_task(handler)

    # --- HANDLERS ---
    def handle_search(self):
        term = self.ask("Enter search term: ")
        if not term:
            self.output("Search term cannot be empty. Please enter a valid search term.")
            return
        hits = self.controller.search(term)
        for hit in hits:
            self.output(f"{hit.count} Occurrence/s at ( {hit.row},{hit.column} )")
        if self.controller.last_warning:
            self.output(self.controller.last_warning)

    def handle_edit(self):
        position = self.ask("Enter cell position [row,column]: ")
        if not POSITION_FORMAT.fullmatch(position):
            self.output("Invalid format.")
            return
        row_index, column_index = (int(p) for p in position.split(","))

        grid = self.controller.grid
        if row_index >= grid.row_count():
            self.output("Invalid row index")
            return
        if column_index >= grid.column_count(row_index):
            self.output("Invalid column index")
            return

        try:
            mode = EditMode.parse(self.ask("Edit key, value or both? [key/value/both]: "))
        except GridError as e:
            self.output(str(e))
            return

        new_key, new_value = "", ""
        if mode in (EditMode.KEY, EditMode.BOTH):
            new_key = self.ask("Enter new key: ")
        if mode in (EditMode.VALUE, EditMode.BOTH):
            new_value = self.ask("Enter new value: ")

        cell = self.controller.edit_cell(row_index, column_index, new_key, new_value, mode)
        self.output(f"Cell ( {row_index},{column_index} ) is now {cell}")

    def handle_print(self):
        text = self.controller.print_table()
        self.output(text if text else "(empty grid)")

    def handle_add_row(self):
        raw = self.ask("Number of cells to add: ")
        try:
            count = int(raw)
        except ValueError:
            self.output("Invalid number format. Please enter a valid number.")
            return
        if count <= 0:
            self.output("Number of cells must be positive. Please enter a number greater than 0.")
            return
        self.controller.add_row(count)
        self.output(f"Row {self.controller.grid.row_count() - 1} added with {count} cell/s.")

    def handle_sort(self):
        raw = self.ask("Enter row to sort: ")
        try:
            row_index = int(raw)
        except ValueError:
            self.output("Invalid number format. Please enter a valid row number.")
            return
        if row_index < 0 or row_index >= self.controller.grid.row_count():
            self.output("Invalid row index.")
            return

        raw_order = self.ask("Sort order [asc/desc]: ")
        try:
            order = SortOrder.parse(raw_order)
        except GridError:
            self.output("Invalid order.")
            return
        self.controller.sort_row(row_index, order)
        self.output(f"Row {row_index} sorted ({order.value}).")

    def handle_reset(self):
        dimensions = self.ask("Enter table dimensions [ROWSxCOLUMNS]: ")
        if not DIMENSIONS_FORMAT.fullmatch(dimensions):
            self.output("Invalid format.")
            return
        rows, columns = (int(p) for p in dimensions.split("x"))
        if rows <= 0 or columns <= 0:
            self.output("Dimensions must be greater than 0.")
            return
        self.controller.reset_table(rows, columns)
        self.output(self.controller.print_table())

    def handle_view(self):
        try:
            from ui.table_view import show_grid_window
            show_grid_window(self.controller)
        except (ImportError, RuntimeError) as e:
            self.output(f"Could not open the viewer: {e}")

    def handle_export(self):
        path = self.ask("Export file [grid.xlsx]: ") or "grid.xlsx"
        if not path.lower().endswith(".xlsx"):
            path += ".xlsx"
        self.controller.export_excel(path)
        self.output(f"Grid exported to {path}")
