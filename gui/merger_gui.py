# Concord V1
import logging
import tkinter as tk
from tkinter import filedialog, messagebox

import customtkinter as ctk
from tkinterdnd2 import TkinterDnD, DND_FILES

from core.config import (
    APPEARANCE_MODE,
    EXPORT_DIR,
    EXPORT_EXTENSIONS,
    OPEN_DIALOG_FILETYPES,
    SAVE_DIALOG_FILETYPES,
)
from core.errors import ConcordError
from core.formatter import DirectorySink
from core.merger import MergeSession, NOT_ANALYZED_STATUS, batch_status
from core.utils import default_export_name

LOGGER = logging.getLogger(__name__)

ctk.set_appearance_mode(APPEARANCE_MODE)

STATUS_COLORS = {
    "muted": ("#6B7280", "#9CA3AF"),
    "ok": ("#0F766E", "#2DD4BF"),
    "warn": ("#B45309", "#FACC15"),
    "error": ("#B91C1C", "#F87171"),
}
FILE_LIST_HEADERS = ["", "File", "Type", "Rows", "Columns", "Status"]


class CTkDnD(ctk.CTk, TkinterDnD.DnDWrapper):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.TkdndVersion = TkinterDnD._require(self)


class MergerGUI:
    """Window for loading CSV/Excel files, finding shared columns, merging and exporting."""

    def __init__(self, master=None, session=None):
        self.session = session or MergeSession()

        # Use our custom CTkDnD main window for drag-and-drop support.
        self.mergerApp = CTkDnD() if master is None else ctk.CTkToplevel(master)
        self.mergerApp.title("Concord")
        self.mergerApp.geometry("900x700")

        # One checkbox variable per registry row, same order as the registry.
        self.file_checks = []
        self.select_all = tk.BooleanVar(value=False)

        # Boolean variable for theme mode; True = dark mode.
        self.theme_mode = tk.BooleanVar(value=APPEARANCE_MODE == "dark")

        self._build_gui()
        self._refresh_files()

    def _build_gui(self):
        self.mergerApp.grid_columnconfigure(0, weight=1)
        self.mergerApp.grid_rowconfigure(1, weight=1)

        self.upload_frame = ctk.CTkFrame(self.mergerApp)
        self.upload_frame.grid(row=0, column=0, padx=10, pady=10, sticky="nsew")
        self._build_upload_section(self.upload_frame)

        self.files_frame = ctk.CTkFrame(self.mergerApp)
        self.files_frame.grid(row=1, column=0, padx=10, pady=5, sticky="nsew")
        self._build_file_list(self.files_frame)

        self.analysis_frame = ctk.CTkFrame(self.mergerApp)
        self.analysis_frame.grid(row=2, column=0, padx=10, pady=5, sticky="nsew")
        self._build_analysis_section(self.analysis_frame)

        self.controls_frame = ctk.CTkFrame(self.mergerApp)
        self.controls_frame.grid(row=3, column=0, padx=10, pady=(5, 10), sticky="ew")
        self._build_controls(self.controls_frame)

    def _build_upload_section(self, parent_frame):
        parent_frame.grid_columnconfigure(0, weight=1)
        self.drop_button = ctk.CTkButton(parent_frame,
            text="\n➕\n\nChoose CSV / Excel Files or\nDrag & Drop Here",
            command=self._browse_files,
            border_width=3,
            fg_color="transparent",
            hover_color=("#D6D6D6", "#505050"),  # Light and dark hover color
            text_color=("#333333", "#FFFFFF"),
            corner_radius=10,
            height=120)
        self.drop_button.grid(row=0, column=0, padx=20, pady=(15, 5), sticky="ew")
        # Enable drag and drop on the upload button.
        self.drop_button.drop_target_register(DND_FILES)
        self.drop_button.dnd_bind('<<Drop>>', self.drop_files)

        self.upload_status = ctk.CTkLabel(parent_frame, text="", font=("Helvetica", 12))
        self.upload_status.grid(row=1, column=0, padx=5, pady=(0, 10), sticky="w")

    def _build_file_list(self, parent_frame):
        parent_frame.grid_columnconfigure(0, weight=1)
        parent_frame.grid_rowconfigure(1, weight=1)

        header = ctk.CTkFrame(parent_frame, fg_color="transparent")
        header.grid(row=0, column=0, padx=5, pady=(5, 0), sticky="ew")
        ctk.CTkCheckBox(header, text="", width=24, variable=self.select_all,
                        command=self._toggle_select_all).grid(row=0, column=0, padx=5)
        for col, title in enumerate(FILE_LIST_HEADERS[1:], start=1):
            ctk.CTkLabel(header, text=title, font=("Helvetica", 12, "bold"),
                         anchor="w").grid(row=0, column=col, padx=5, sticky="ew")
        header.grid_columnconfigure(1, weight=1)

        self.file_list = ctk.CTkScrollableFrame(parent_frame)
        self.file_list.grid(row=1, column=0, padx=5, pady=5, sticky="nsew")
        self.file_list.grid_columnconfigure(1, weight=1)

        self.remove_button = ctk.CTkButton(parent_frame, text="Remove Selected",
                                           command=self._remove_selected, state="disabled")
        self.remove_button.grid(row=2, column=0, padx=5, pady=(0, 5), sticky="e")

    def _build_analysis_section(self, parent_frame):
        parent_frame.grid_columnconfigure(1, weight=1)
        self.analyze_button = ctk.CTkButton(parent_frame, text="Analyze Columns", command=self._analyze)
        self.analyze_button.grid(row=0, column=0, padx=5, pady=5, sticky="w")

        self.analysis_status = ctk.CTkLabel(parent_frame, text=NOT_ANALYZED_STATUS, font=("Helvetica", 12))
        self.analysis_status.grid(row=0, column=1, padx=5, pady=5, sticky="w")

        self.shared_columns_box = ctk.CTkTextbox(parent_frame, height=60, wrap="word")
        self.shared_columns_box.configure(state="disabled")

    def _build_controls(self, parent_frame):
        parent_frame.grid_columnconfigure(3, weight=1)
        self.merge_button = ctk.CTkButton(parent_frame, text="Merge Files", command=self._merge)
        self.merge_button.grid(row=0, column=0, padx=5, pady=10)
        self.export_excel_button = ctk.CTkButton(parent_frame, text="Export Excel",
                                                 command=lambda: self._export("excel"))
        self.export_excel_button.grid(row=0, column=1, padx=5, pady=10)
        self.export_csv_button = ctk.CTkButton(parent_frame, text="Export CSV",
                                               command=lambda: self._export("csv"))
        self.export_csv_button.grid(row=0, column=2, padx=5, pady=10)

        self.export_status = ctk.CTkLabel(parent_frame, text="", font=("Helvetica", 12))
        self.export_status.grid(row=1, column=0, columnspan=4, padx=5, pady=(0, 5), sticky="w")

        # Theme toggle switch (no label) at the bottom-right of the controls frame.
        self.theme_switch = ctk.CTkSwitch(parent_frame, text="", variable=self.theme_mode,
                                          command=self.toggle_theme, switch_width=20, switch_height=10)
        self.theme_switch.place(relx=1.0, rely=1.0, anchor="se")

    def toggle_theme(self):
        if self.theme_mode.get():
            ctk.set_appearance_mode("dark")
        else:
            ctk.set_appearance_mode("light")

    # --- File selection ---
    def _browse_files(self):
        with self.session.begin_dialog() as allowed:
            if not allowed:
                return
            try:
                paths = filedialog.askopenfilenames(
                    parent=self.mergerApp,
                    title="Select Files",
                    filetypes=OPEN_DIALOG_FILETYPES,
                )
            except tk.TclError:
                LOGGER.exception("Error opening file dialog")
                paths = self._ask_paths_fallback()

        # Empty selection means the dialog was cancelled.
        if paths:
            self._process_paths(list(paths))

    def _ask_paths_fallback(self):
        dialog = ctk.CTkInputDialog(text="Enter file paths separated by ';'", title="Select Files")
        raw = dialog.get_input() or ""
        return [p.strip() for p in raw.split(";") if p.strip()]

    def drop_files(self, event):
        paths = list(self.mergerApp.tk.splitlist(event.data))
        if paths:
            self._process_paths(paths)

    def _process_paths(self, paths):
        result = self.session.add_sources(paths)
        self._refresh_files()

        if result.skipped_count or result.failed_count:
            self._set_status(self.upload_status,
                             f"{self.session.upload_status()} ({batch_status(result)})", "warn")
        if result.failed_count:
            details = "\n".join(f"{name}: {exc}" for name, exc in result.failed)
            messagebox.showerror("Error", f"Some files could not be loaded:\n\n{details}")

    # --- File list ---
    def _refresh_files(self):
        for child in self.file_list.winfo_children():
            child.destroy()
        self.file_checks = []
        self.select_all.set(False)

        files = self.session.files
        if not files:
            ctk.CTkLabel(self.file_list, text="No files uploaded",
                         text_color=STATUS_COLORS["muted"]).grid(row=0, column=0, columnspan=6, pady=20)

        for row_idx, loaded in enumerate(files):
            var = tk.BooleanVar(value=False)
            self.file_checks.append(var)
            ctk.CTkCheckBox(self.file_list, text="", width=24, variable=var,
                            command=self._update_button_states).grid(row=row_idx, column=0, padx=5, pady=2)
            cells = [
                loaded.name,
                loaded.kind.value.upper(),
                str(loaded.row_count),
                str(loaded.column_count),
                loaded.status.value,
            ]
            for col, text in enumerate(cells, start=1):
                ctk.CTkLabel(self.file_list, text=text, anchor="w").grid(
                    row=row_idx, column=col, padx=5, pady=2, sticky="ew")

        count = len(files)
        self._set_status(self.upload_status, self.session.upload_status(), "ok" if count else "muted")
        self._update_button_states()

    def _toggle_select_all(self):
        for var in self.file_checks:
            var.set(self.select_all.get())
        self._update_button_states()

    def _selected_indices(self):
        return [idx for idx, var in enumerate(self.file_checks) if var.get()]

    def _remove_selected(self):
        indices = self._selected_indices()
        if not indices:
            return
        self.session.remove(indices)
        self._refresh_files()
        self._show_analysis()

    # --- Pipeline actions ---
    def _analyze(self):
        if not self.session.can_analyze:
            return
        self.session.analyze()
        self._show_analysis()
        self._update_button_states()

    def _show_analysis(self):
        shared = self.session.shared_columns
        if shared is None:
            tone = "muted"
        else:
            tone = "ok" if shared else "warn"
        self._set_status(self.analysis_status, self.session.analysis_status(), tone)

        if shared:
            self.shared_columns_box.configure(state="normal")
            self.shared_columns_box.delete("1.0", "end")
            self.shared_columns_box.insert("1.0", "  ·  ".join(shared))
            self.shared_columns_box.configure(state="disabled")
            self.shared_columns_box.grid(row=1, column=0, columnspan=2, padx=5, pady=(0, 5), sticky="ew")
        else:
            self.shared_columns_box.grid_remove()

    def _merge(self):
        try:
            self.session.merge()
            messagebox.showinfo("Success", self.session.merge_status())
        except ConcordError as e:
            messagebox.showerror("Error", f"Failed to merge files: {e}")
        except Exception as e:
            LOGGER.exception("Merge error")
            messagebox.showerror("Error", f"Failed to merge files: {e}")
        self._update_button_states()

    def _export(self, fmt):
        if not self.session.can_export:
            messagebox.showwarning("Export", "Please merge files first")
            return

        filename = default_export_name(fmt)
        try:
            destination = filedialog.asksaveasfilename(
                parent=self.mergerApp,
                title="Save Merged File",
                initialdir=str(EXPORT_DIR),
                initialfile=filename,
                defaultextension=f".{EXPORT_EXTENSIONS[fmt]}",
                filetypes=SAVE_DIALOG_FILETYPES[fmt],
            )
        except tk.TclError:
            LOGGER.exception("Save dialog failed; using default location")
            destination = str(EXPORT_DIR / filename)

        if not destination:
            return

        try:
            result = self.session.export(fmt, destination, fallback=DirectorySink(EXPORT_DIR))
            self._set_status(self.export_status, self.session.export_status(),
                             "warn" if result.fallback_used else "ok")
        except ConcordError as e:
            LOGGER.error("Export error: %s", e)
            self._set_status(self.export_status, "Export failed", "error")
        except Exception:
            LOGGER.exception("Export error")
            self._set_status(self.export_status, "Export failed", "error")

    # --- Helpers ---
    def _set_status(self, label, text, tone="muted"):
        label.configure(text=text, text_color=STATUS_COLORS[tone])

    def _update_button_states(self):
        def state(enabled):
            return "normal" if enabled else "disabled"

        self.analyze_button.configure(state=state(self.session.can_analyze))
        self.merge_button.configure(state=state(self.session.can_merge))
        self.export_excel_button.configure(state=state(self.session.can_export))
        self.export_csv_button.configure(state=state(self.session.can_export))
        self.remove_button.configure(state=state(bool(self._selected_indices())))

    def run(self):
        if isinstance(self.mergerApp, ctk.CTk):
            self.mergerApp.mainloop()


if __name__ == "__main__":
    app = MergerGUI()
    app.run()
