import tkinter as tk
from tkinter import ttk

from controllers.grid_controller import GridController

ROW_COLUMN = "Row"


class GridTableView(ttk.Frame):
    """
    Read-only Treeview of the grid; the search box keeps rows with a matching cell.
    """

    def __init__(self, parent, controller: GridController, *args, **kwargs):
        super().__init__(parent, *args, **kwargs)
        self.controller = controller
        self.search_var = tk.StringVar()
        self._width = 0

        self.columnconfigure(0, weight=1)
        self.rowconfigure(1, weight=1)
        self._build_search_bar().grid(row=0, column=0, sticky="ew", pady=(0, 5))
        self._build_tree().grid(row=1, column=0, sticky="nsew")

        self.search_var.trace_add("write", lambda *_: self._apply_filter())
        self.refresh()

    def _build_search_bar(self) -> ttk.Frame:
        bar = ttk.Frame(self)
        bar.columnconfigure(4, weight=1)
        ttk.Label(bar, text="Search:").grid(row=0, column=0, padx=(0, 5))
        self.search_entry = ttk.Entry(bar, textvariable=self.search_var, width=30)
        self.search_entry.grid(row=0, column=1, padx=(0, 10))
        ttk.Button(bar, text="Clear", command=lambda: self.search_var.set("")).grid(row=0, column=2)
        ttk.Button(bar, text="Reload", command=self.refresh).grid(row=0, column=3, padx=(5, 0))
        self.status_label = ttk.Label(bar, text="")
        self.status_label.grid(row=0, column=4, sticky="e")
        return bar

    def _build_tree(self) -> ttk.Frame:
        holder = ttk.Frame(self)
        holder.columnconfigure(0, weight=1)
        holder.rowconfigure(0, weight=1)
        self._tree = ttk.Treeview(holder, show="headings")
        scroll_y = ttk.Scrollbar(holder, orient="vertical", command=self._tree.yview)
        scroll_x = ttk.Scrollbar(holder, orient="horizontal", command=self._tree.xview)
        self._tree.configure(yscrollcommand=scroll_y.set, xscrollcommand=scroll_x.set)
        self._tree.grid(row=0, column=0, sticky="nsew")
        scroll_y.grid(row=0, column=1, sticky="ns")
        scroll_x.grid(row=1, column=0, sticky="ew")
        return holder

    def refresh(self):
        """Re-read the grid from the controller and rebuild the headings."""
        rows = self.controller.get_table_rows()
        self._width = max((len(cells) for cells in rows), default=0)
        columns = [ROW_COLUMN] + [str(c) for c in range(self._width)]
        self._tree["columns"] = columns
        for col in columns:
            self._tree.heading(col, text=col)
            self._tree.column(col, anchor="w", width=60 if col == ROW_COLUMN else 140, stretch=col != ROW_COLUMN)
        self._apply_filter()

    def _apply_filter(self):
        term = self.search_var.get()
        shown = self.controller.filter_rows(term)
        total = self.controller.grid.row_count()
        self.clear()
        for index, cells in shown:
            self._tree.insert("", "end", values=[index] + cells + [""] * (self._width - len(cells)))
        if term:
            self.status_label.config(text=f"Showing {len(shown)} of {total} rows")
        else:
            self.status_label.config(text=f"Showing all {total} rows")

    def clear(self):
        self._tree.delete(*self._tree.get_children())


def show_grid_window(controller: GridController):
    try:
        window = tk.Tk()
    except tk.TclError as e:
        raise RuntimeError(f"No display available ({e})")
    window.title(f"Grid Viewer - {controller.file_name or 'unsaved grid'}")
    window.geometry("900x500")
    view = GridTableView(window, controller=controller)
    view.pack(fill="both", expand=True, padx=10, pady=10)
    window.mainloop()
