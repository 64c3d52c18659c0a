"""
Design (ui.py)
- Purpose: Build and manage the Tkinter UI (hunt list, reward banner, detail dialog, logs).
- Inputs: HuntStore (shared state), LocationService (last resolved address).
- Outputs: None (renders UI, calls store mutations).
- Side effects: Creates windows; opens a file picker; starts address capture.
- Thread-safety: UI code runs on main thread; store/location listeners call schedule_refresh.
"""

import base64
import logging
import math
import tkinter as tk
import uuid
from tkinter import filedialog, messagebox, ttk
from typing import Dict

from .config import APP_NAME, LOG_MAX_LINES, PHOTO_PREVIEW_MAX
from .location import LocationService
from .logger import get_logger, make_formatter
from .repository import HuntStore
from .utils import format_found_at, read_photo, reward_message

logger = get_logger(__name__)

BG = "#1e1e1e"
PANEL = "#2b2b2b"
FG = "#f0f0f0"
PHOTO_TYPES = [("Images", "*.png *.gif"), ("All files", "*.*")]


class TkLogHandler(logging.Handler):
    """Mirror log records into the Logs panel (posted onto the Tk main loop)."""

    def __init__(self, ui: "AppUI") -> None:
        super().__init__()
        self.ui = ui
        self.setFormatter(make_formatter())

    def attach(self) -> None:
        logging.getLogger().addHandler(self)

    def detach(self) -> None:
        """Stop mirroring; call before the Tk root is destroyed."""
        logging.getLogger().removeHandler(self)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record) + "\n"
            self.ui.root.after(0, lambda: self.ui._append_log(line))
        except Exception:
            self.handleError(record)


class AppUI:
    """
    Design (AppUI)
    - Purpose: Encapsulate all UI creation and behavior.
    - Public attributes:
        show_logs (tk.BooleanVar): toggles visibility of the logs panel
    - Public methods:
        schedule_refresh(): thread-safe way to repaint after a store/location change
        open_details(item_id): open (or focus) the detail dialog for one item
    """

    def __init__(self, root: tk.Tk, store: HuntStore, location: LocationService):
        self.root = root
        self.store = store
        self.location = location
        self.show_logs = tk.BooleanVar(value=False)
        self._dialogs: Dict[uuid.UUID, "ItemDetailDialog"] = {}

        # Window
        self.root.title(APP_NAME)
        self.root.rowconfigure(0, weight=1)
        self.root.columnconfigure(0, weight=1)
        self.root.configure(bg=BG)

        # Paned window: top = content (banner, tree, buttons), bottom = logs (when shown)
        self.paned = ttk.PanedWindow(self.root, orient=tk.VERTICAL)
        self.paned.grid(row=0, column=0, sticky="nsew")

        content = tk.Frame(self.paned, bg=BG)
        content.rowconfigure(1, weight=1)
        content.columnconfigure(0, weight=1)
        self.paned.add(content, weight=1)

        self.bottom_frame = tk.Frame(self.paned, bg=BG)
        self.logs_box = tk.Text(self.bottom_frame, height=6, bg="#1b1b1b", fg="#dddddd", wrap="none")
        self.logs_box.configure(state="disabled")
        self.paned.add(self.bottom_frame, weight=0)

        # Style
        style = ttk.Style(self.root)
        style.theme_use("default")
        style.configure(
            "Treeview",
            background=PANEL,
            foreground=FG,
            fieldbackground=PANEL,
            rowheight=28,
            font=("Segoe UI", 10),
        )
        style.configure("Treeview.Heading", background=BG, foreground="#ffffff", font=("Segoe UI", 10, "bold"))
        style.map("Treeview", background=[("selected", "#444")], foreground=[])

        # Reward banner
        self.banner = tk.Label(content, bg=PANEL, fg=FG, font=("Segoe UI", 10), pady=8)
        self.banner.grid(row=0, column=0, sticky="ew", padx=10, pady=(10, 5))

        # Treeview (one row per item, store order)
        self.columns = ("status", "title", "hint")
        self.tree = ttk.Treeview(content, columns=self.columns, show="headings", selectmode="browse")
        self.tree.grid(row=1, column=0, sticky="nsew", padx=10, pady=5)
        self.tree.heading("status", text="")
        self.tree.heading("title", text="Location")
        self.tree.heading("hint", text="Hint")
        self.tree.column("status", width=40, anchor="center", stretch=False)
        self.tree.column("title", width=180)
        self.tree.column("hint", width=320)
        self.tree.tag_configure("found", foreground="#7CFC00")
        self.tree.tag_configure("open", foreground="#9a9a9a")
        self.tree.bind("<Double-1>", self.on_double_click)
        self.tree.bind("<Return>", self.on_double_click)

        self.footer = tk.Label(content, bg=BG, fg="#bbbbbb", font=("Segoe UI", 9))
        self.footer.grid(row=2, column=0, sticky="ew", padx=10)

        # Buttons & toggles
        button_frame = tk.Frame(content, bg=BG)
        button_frame.grid(row=3, column=0, sticky="ew", padx=10, pady=(5, 10))
        ttk.Button(button_frame, text="Details", command=self.open_selected).pack(side=tk.LEFT, padx=5)
        self.reset_button = ttk.Button(button_frame, text="Reset", command=self.confirm_reset)
        self.reset_button.pack(side=tk.LEFT, padx=5)
        tk.Checkbutton(
            button_frame,
            text="Show Logs",
            variable=self.show_logs,
            fg="white",
            bg=BG,
            selectcolor=PANEL,
            activebackground=BG,
            activeforeground="white",
            command=self.toggle_logs,
        ).pack(side=tk.LEFT, padx=5)

        self.log_handler = TkLogHandler(self)
        self.log_handler.attach()

        # Initial paint
        self.refresh_ui()

    # ---------- Public API for listeners ----------

    def schedule_refresh(self) -> None:
        """
        Purpose: Request a repaint safely (store listeners run on the main thread, location
                 listeners on a worker thread).
        Side effects: Schedules refresh_ui on the main thread via Tk.after().
        """
        self.root.after(0, self.refresh_ui)

    def refresh_ui(self) -> None:
        """
        Purpose: Rebuild the Tree rows, banner and footer from the store; refresh open dialogs.
        Thread-safety: Must run on main thread (use schedule_refresh from other threads).
        """
        items = self.store.items
        found = sum(1 for item in items if item.found)
        selected = self.tree.selection()

        self.tree.delete(*self.tree.get_children())
        for item in items:
            mark = "✔" if item.found else "●"
            tag = "found" if item.found else "open"
            self.tree.insert("", "end", iid=str(item.id), values=(mark, item.title, item.hint), tags=(tag,))
        if selected and self.tree.exists(selected[0]):
            self.tree.selection_set(selected[0])

        self.banner.configure(text=reward_message(self.store.reward_tier, len(items)))
        self.footer.configure(text=f"Found {found} of {len(items)}")
        self.reset_button.state(["!disabled"] if found else ["disabled"])

        for dialog in list(self._dialogs.values()):
            dialog.refresh()

    # ---------- UI callbacks ----------

    def on_double_click(self, _event=None) -> None:
        self.open_selected()

    def open_selected(self) -> None:
        selected = self.tree.selection()
        if not selected:
            messagebox.showinfo("Details", "Select a location first.")
            return
        self.open_details(uuid.UUID(selected[0]))

    def open_details(self, item_id: uuid.UUID) -> None:
        dialog = self._dialogs.get(item_id)
        if dialog is not None:
            dialog.win.lift()
            return
        if self.store.get(item_id) is None:
            return
        self._dialogs[item_id] = ItemDetailDialog(self, item_id)

    def dialog_closed(self, item_id: uuid.UUID) -> None:
        self._dialogs.pop(item_id, None)

    def confirm_reset(self) -> None:
        if not messagebox.askyesno(
            "Reset progress?", "This will clear all photos, timestamps, and addresses."
        ):
            return
        self.store.reset_all()

    def toggle_logs(self) -> None:
        """Show/hide logs in the bottom pane. Resize pane to show/hide."""
        self.paned.update_idletasks()
        total = self.paned.winfo_height()
        if self.show_logs.get():
            self.paned.pane(self.bottom_frame, weight=1)
            self.logs_box.pack(fill=tk.BOTH, expand=True, padx=10, pady=(0, 6))
            if total > 0:
                self.paned.sashpos(0, int(total * 0.7))
        else:
            self.logs_box.pack_forget()
            self.paned.pane(self.bottom_frame, weight=0)
            if total > 0:
                self.paned.sashpos(0, total)

    # ---------- internal helper for Logs ----------

    def _append_log(self, text: str) -> None:
        """
        Purpose: Append one line to the Logs panel and trim to LOG_MAX_LINES.
        Thread-safety: Main thread only (called via after()).
        """
        self.logs_box.configure(state="normal")
        self.logs_box.insert("end", text)
        self.logs_box.see("end")
        total_lines = int(self.logs_box.index("end-1c").split(".")[0])
        if total_lines > LOG_MAX_LINES:
            remove = total_lines - LOG_MAX_LINES
            self.logs_box.delete("1.0", f"{remove + 1}.0")
        self.logs_box.configure(state="disabled")


class ItemDetailDialog:
    """
    Design (ItemDetailDialog)
    - Purpose: Detail view for one item: a card that flips between the clue and the photo,
               photo picking, mark found, remove photo, found time and address.
    - State:
        picked_photo: bytes picked in this dialog (not yet stored)
        flipped: True while the photo side of the card is shown
    - Rule: "Mark as Found" needs a picked photo unless the item is already found.
    """

    def __init__(self, ui: AppUI, item_id: uuid.UUID):
        self.ui = ui
        self.item_id = item_id
        self.flipped = False
        current = ui.store.get(item_id)
        self.picked_photo = current.photo_data if current else None
        self._preview = None  # keep a reference or Tk drops the image

        self.win = tk.Toplevel(ui.root)
        self.win.title("Details")
        self.win.configure(bg=BG)
        self.win.protocol("WM_DELETE_WINDOW", self.close)

        self.card = tk.Frame(self.win, bg=PANEL, width=PHOTO_PREVIEW_MAX + 40, height=260, cursor="hand2")
        self.card.grid(row=0, column=0, columnspan=3, sticky="nsew", padx=10, pady=10)
        self.card.grid_propagate(False)
        self.card.columnconfigure(0, weight=1)
        self.card_title = tk.Label(self.card, bg=PANEL, fg=FG, font=("Segoe UI", 14, "bold"), anchor="w")
        self.card_hint = tk.Label(self.card, bg=PANEL, fg="#bbbbbb", anchor="w", justify="left", wraplength=320)
        self.card_photo = tk.Label(self.card, bg=PANEL, fg="#bbbbbb")
        self.card_footer = tk.Label(self.card, text="Click card to flip", bg=PANEL, fg="#888888",
                                    font=("Segoe UI", 8))
        for widget in (self.card, self.card_title, self.card_hint, self.card_photo, self.card_footer):
            widget.bind("<Button-1>", self.flip)

        self.pick_button = ttk.Button(self.win, command=self.pick_photo)
        self.pick_button.grid(row=1, column=0, columnspan=3, sticky="ew", padx=10)
        self.found_button = ttk.Button(self.win, command=self.mark_found)
        self.found_button.grid(row=2, column=0, sticky="ew", padx=(10, 5), pady=5)
        self.remove_button = ttk.Button(self.win, text="Remove Photo", command=self.remove_photo)
        self.remove_button.grid(row=2, column=1, columnspan=2, sticky="ew", padx=(5, 10), pady=5)

        self.found_at_label = tk.Label(self.win, bg=BG, fg="#bbbbbb", anchor="w", font=("Segoe UI", 9))
        self.found_at_label.grid(row=3, column=0, columnspan=3, sticky="ew", padx=10)
        self.address_label = tk.Label(self.win, bg=BG, fg="#bbbbbb", anchor="w", font=("Segoe UI", 9))
        self.address_label.grid(row=4, column=0, columnspan=3, sticky="ew", padx=10, pady=(0, 10))

        self.refresh()

    def refresh(self) -> None:
        item = self.ui.store.get(self.item_id)
        if item is None:
            self.close()
            return

        for widget in self.card.grid_slaves():
            widget.grid_forget()
        if self.flipped:
            self._show_photo(item.photo_data)
            self.card_photo.grid(row=0, column=0, sticky="nsew", padx=8, pady=8)
        else:
            mark = "  ✔" if item.found else ""
            self.card_title.configure(text=item.title + mark)
            self.card_hint.configure(text=item.hint)
            self.card_title.grid(row=0, column=0, sticky="ew", padx=12, pady=(12, 4))
            self.card_hint.grid(row=1, column=0, sticky="ew", padx=12)
        self.card_footer.grid(row=2, column=0, sticky="s", pady=6)
        self.card.rowconfigure(1, weight=1)

        self.pick_button.configure(text="Change Photo" if item.photo_data else "Pick Photo")
        self.found_button.configure(text="Marked as Found" if item.found else "Mark as Found")
        can_mark = item.found or self.picked_photo is not None
        self.found_button.state(["!disabled"] if can_mark else ["disabled"])
        self.remove_button.state(["!disabled"] if item.photo_data else ["disabled"])

        stamp = format_found_at(item.found_at)
        self.found_at_label.configure(text=f"Found: {stamp}" if stamp else "")
        self.address_label.configure(text=f"Address: {item.address}" if item.address else "")

    def _show_photo(self, data: bytes | None) -> None:
        if not data:
            self._preview = None
            self.card_photo.configure(image="", text="No photo yet")
            return
        try:
            image = tk.PhotoImage(master=self.win, data=base64.b64encode(data).decode("ascii"))
        except tk.TclError:
            self._preview = None
            self.card_photo.configure(image="", text="Preview unavailable for this image format")
            return
        factor = max(1, math.ceil(max(image.width(), image.height()) / PHOTO_PREVIEW_MAX))
        self._preview = image.subsample(factor) if factor > 1 else image
        self.card_photo.configure(image=self._preview, text="")

    # ---------- callbacks ----------

    def flip(self, _event=None) -> None:
        self.flipped = not self.flipped
        self.refresh()

    def pick_photo(self) -> None:
        path = filedialog.askopenfilename(parent=self.win, title="Pick Photo", filetypes=PHOTO_TYPES)
        if not path:
            return
        # address is resolved while the player decides to mark the item
        self.ui.location.capture_address()
        data = read_photo(path)
        if data is None:
            messagebox.showerror("Pick Photo", "Could not read the selected file.", parent=self.win)
            return
        self.picked_photo = data
        self.refresh()

    def mark_found(self) -> None:
        item = self.ui.store.get(self.item_id)
        if item is None:
            return
        photo = self.picked_photo if self.picked_photo is not None else item.photo_data
        self.ui.store.mark_found(self.item_id, photo_data=photo, address=self.ui.location.last_address)

    def remove_photo(self) -> None:
        self.picked_photo = None
        self.ui.store.remove_photo(self.item_id)

    def close(self) -> None:
        self.ui.dialog_closed(self.item_id)
        self.win.destroy()
