#!/usr/bin/env python3
"""
b64view.py - Base64 to formatted JSON, as a small desktop window.

Paste Base64-encoded JSON into the left pane; the right pane shows it decoded
and pretty-printed with 2-space indentation, or says why it could not be.
Every edit re-runs the decode synchronously.

Features:
  - Copy the formatted JSON (pyperclip, with a Tk clipboard fallback)
  - Paste from the clipboard, or watch the clipboard and load changes
  - Activity log pane, optionally mirrored to a SQLite file

Usage:
    python b64view.py [--config b64view.ini] [--watch] [--poll 0.5]
                      [--log-db b64view.db] [--input eyJhIjogMX0=]
"""

import sys
import threading
import time
from datetime import datetime

try:
    import pyperclip  # noqa: F401  (clipboard_export needs it)
except ImportError:
    print("Missing dependency: pip install pyperclip")
    sys.exit(1)

try:
    import tkinter as tk
    from tkinter import scrolledtext
except ImportError:
    print("tkinter not available - install python3-tk")
    sys.exit(1)

from clipboard_export import HiddenFieldCopier, copy_text, read_clipboard
from db_logger import DBLogger
from presenter import Presenter, ViewState
from settings import Settings, SettingsError, load_settings

WINDOW_TITLE = "Base64 to Formatted JSON"
PLACEHOLDER  = "Your formatted JSON will appear here..."
INPUT_HINT   = ("Paste your Base64 string here... "
                "(e.g., eyJuYW1lIjogIkpvaG4gRG9lIiwgImFnZSI6IDMwfQ==)")

# ── Colours ───────────────────────────────────────────────────────────────────
C = {
    "bg_dark":   "#1e2127",
    "bg_mid":    "#282a36",
    "bg_input":  "#44475a",
    "bg_log":    "#21222c",
    "fg":        "#f8f8f2",
    "fg_dim":    "#6272a4",
    "fg_accent": "#8be9fd",
    "ok":        "#50fa7b",
    "err":       "#ff5555",
    "warn":      "#ffb86c",
}


# ─── Main application ─────────────────────────────────────────────────────────

class B64ViewApp:
    def __init__(self, root: tk.Tk, settings: Settings):
        self.root        = root
        self.settings    = settings
        self.watching    = False
        self._watch_gen  = 0
        self.last_clip   = ""

        self._db = None
        if settings.log_db:
            self._db = DBLogger(settings.log_db)
        self._fallback_copier = HiddenFieldCopier(root)

        self.presenter = Presenter(
            exporter=self._export,
            scheduler=self.root.after,
            feedback_ms=settings.feedback_ms,
            on_change=self._render,
            log=self._log,
        )

        self._build_ui()
        self._render(self.presenter.state)

        if settings.initial_input:
            self._replace_input(settings.initial_input)
        if settings.watch:
            self._start_watching()

    # ── UI ────────────────────────────────────────────────────────────────────

    def _build_ui(self):
        self.root.title(WINDOW_TITLE)
        self.root.geometry("960x640")
        self.root.minsize(640, 420)
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        self.root.configure(bg=C["bg_dark"])

        # ── Header ────────────────────────────────────────────────────────────
        header = tk.Frame(self.root, bg=C["bg_dark"], padx=8, pady=6)
        header.pack(fill=tk.X)

        self.status_dot = tk.Label(
            header, text="●", fg=C["fg_dim"], bg=C["bg_dark"], font=("Courier", 14)
        )
        self.status_dot.pack(side=tk.LEFT)

        tk.Label(
            header, text=WINDOW_TITLE, fg=C["fg_accent"], bg=C["bg_dark"],
            font=("Helvetica", 12, "bold")
        ).pack(side=tk.LEFT, padx=6)

        self.watch_btn = tk.Button(
            header, text="▶ Watch clipboard", command=self._toggle_watch,
            bg=C["bg_input"], fg=C["fg"], relief=tk.FLAT,
            activebackground="#6272a4", cursor="hand2", padx=6
        )
        self.watch_btn.pack(side=tk.RIGHT, padx=3)

        tk.Label(
            self.root, text="Paste your Base64-encoded JSON data below to decode and beautify it.",
            fg=C["fg_dim"], bg=C["bg_dark"], font=("Helvetica", 10)
        ).pack(fill=tk.X)

        # ── Input / output panes ──────────────────────────────────────────────
        panes = tk.Frame(self.root, bg=C["bg_dark"])
        panes.pack(fill=tk.BOTH, expand=True, padx=4, pady=4)
        panes.columnconfigure(0, weight=1, uniform="pane")
        panes.columnconfigure(1, weight=1, uniform="pane")
        panes.rowconfigure(1, weight=1)

        in_bar = tk.Frame(panes, bg=C["bg_dark"])
        in_bar.grid(row=0, column=0, sticky="ew", padx=(0, 4))
        tk.Label(
            in_bar, text="Base64 Input", fg=C["fg"], bg=C["bg_dark"],
            font=("Helvetica", 10, "bold")
        ).pack(side=tk.LEFT)
        tk.Button(
            in_bar, text="📥 Paste", command=self._on_paste,
            bg=C["bg_input"], fg=C["fg"], relief=tk.FLAT,
            activebackground="#6272a4", cursor="hand2", padx=4, font=("Courier", 9)
        ).pack(side=tk.RIGHT)

        out_bar = tk.Frame(panes, bg=C["bg_dark"])
        out_bar.grid(row=0, column=1, sticky="ew", padx=(4, 0))
        tk.Label(
            out_bar, text="Formatted JSON Output", fg=C["fg"], bg=C["bg_dark"],
            font=("Helvetica", 10, "bold")
        ).pack(side=tk.LEFT)
        self.copy_btn = tk.Button(
            out_bar, text="📋 Copy", command=self.presenter.copy,
            bg=C["bg_input"], fg=C["fg"], relief=tk.FLAT, width=10,
            activebackground="#6272a4", cursor="hand2", padx=4, font=("Courier", 9),
            disabledforeground=C["fg_dim"],
        )
        self.copy_btn.pack(side=tk.RIGHT)

        self.input_text = scrolledtext.ScrolledText(
            panes, bg=C["bg_log"], fg=C["fg"], insertbackground=C["fg"],
            font=("Courier", 10), wrap=tk.CHAR, relief=tk.FLAT, undo=True,
        )
        self.input_text.grid(row=1, column=0, sticky="nsew", padx=(0, 4))
        self.input_text.bind("<<Modified>>", self._on_input_modified)

        self.output_text = scrolledtext.ScrolledText(
            panes, bg=C["bg_log"], fg=C["fg"],
            font=("Courier", 10), wrap=tk.WORD, relief=tk.FLAT, state=tk.DISABLED,
        )
        self.output_text.grid(row=1, column=1, sticky="nsew", padx=(4, 0))
        self.output_text.tag_config("ok", foreground=C["ok"])
        self.output_text.tag_config("err", foreground=C["err"])
        self.output_text.tag_config("placeholder", foreground=C["fg_dim"])

        tk.Label(
            panes, text=INPUT_HINT, fg=C["fg_dim"], bg=C["bg_dark"],
            font=("Courier", 8), anchor=tk.W
        ).grid(row=2, column=0, columnspan=2, sticky="ew")

        # ── Actions ───────────────────────────────────────────────────────────
        actions = tk.Frame(self.root, bg=C["bg_dark"], pady=4)
        actions.pack(fill=tk.X)
        tk.Button(
            actions, text="✕ Clear", command=self._on_clear,
            bg=C["bg_input"], fg=C["fg"], relief=tk.FLAT,
            activebackground="#6272a4", cursor="hand2", padx=16
        ).pack()

        # ── Log ───────────────────────────────────────────────────────────────
        log_frame = tk.Frame(self.root, bg=C["bg_log"])
        log_frame.pack(fill=tk.X, padx=4)

        self.log = scrolledtext.ScrolledText(
            log_frame, bg=C["bg_log"], fg=C["fg"], height=6,
            font=("Courier", 9), state=tk.DISABLED,
            wrap=tk.WORD, relief=tk.FLAT,
        )
        self.log.pack(fill=tk.X)

        for tag, colour in [
            ("ts", C["fg_dim"]), ("ok", C["ok"]), ("err", C["err"]),
            ("info", C["fg_accent"]), ("warn", C["warn"]),
        ]:
            self.log.tag_config(tag, foreground=colour)

        # ── Status bar ────────────────────────────────────────────────────────
        self.statusbar = tk.Label(
            self.root, text="Ready", anchor=tk.W,
            bg=C["bg_dark"], fg=C["fg_dim"], font=("Courier", 9), padx=6
        )
        self.statusbar.pack(fill=tk.X, side=tk.BOTTOM)

    # ── Rendering ─────────────────────────────────────────────────────────────

    def _render(self, state: ViewState):
        if state.error:
            text, tag = state.error, "err"
        elif state.output:
            text, tag = state.output, "ok"
        else:
            text, tag = PLACEHOLDER, "placeholder"

        self.output_text.config(state=tk.NORMAL)
        self.output_text.delete("1.0", tk.END)
        self.output_text.insert(tk.END, text, tag)
        self.output_text.config(state=tk.DISABLED)

        self.copy_btn.config(
            text=state.copy_feedback or "📋 Copy",
            state=tk.NORMAL if state.can_copy else tk.DISABLED,
        )

    def _replace_input(self, text: str):
        self.input_text.delete("1.0", tk.END)
        self.input_text.insert("1.0", text)

    # ── Actions ───────────────────────────────────────────────────────────────

    def _on_input_modified(self, _event=None):
        if not self.input_text.edit_modified():
            return
        self.input_text.edit_modified(False)
        self.presenter.set_input(self.input_text.get("1.0", "end-1c"))

    def _on_clear(self):
        self.presenter.clear()
        self._replace_input("")
        self._set_status("Cleared")

    def _on_paste(self):
        text = read_clipboard()
        if not text:
            self._log("Clipboard is empty or unreadable", "warn", "paste")
            return
        self.presenter.paste(text)
        self._replace_input(text)
        self._set_status(f"Pasted {len(text)} chars @ {datetime.now().strftime('%H:%M:%S')}")

    def _export(self, text: str) -> bool:
        ok = copy_text(text, fallback=self._fallback_copier)
        if ok:
            self.last_clip = text
            self._set_status(f"Copied @ {datetime.now().strftime('%H:%M:%S')}")
        else:
            self._set_status("Clipboard copy failed")
        return ok

    # ── Clipboard watching ────────────────────────────────────────────────────

    def _start_watching(self):
        self.last_clip = read_clipboard()
        self.watching  = True
        self._watch_gen += 1
        gen = self._watch_gen
        self.status_dot.config(fg=C["ok"])
        self.watch_btn.config(text="⏸ Pause watching")
        self._log(f"Watching clipboard every {self.settings.poll}s", "ok", "watch")
        self._set_status("Watching clipboard")

        def _poll():
            while self.watching and gen == self._watch_gen:
                current = read_clipboard()
                if current and current != self.last_clip:
                    self.last_clip = current
                    self.root.after(0, lambda text=current: self._import_clip(text))
                time.sleep(self.settings.poll)

        threading.Thread(target=_poll, daemon=True).start()

    def _stop_watching(self):
        self.watching = False
        self.status_dot.config(fg=C["fg_dim"])
        self.watch_btn.config(text="▶ Watch clipboard")
        self._log("Stopped watching clipboard", "warn", "watch")
        self._set_status("Paused")

    def _toggle_watch(self):
        if self.watching:
            self._stop_watching()
        else:
            self._start_watching()

    def _import_clip(self, text: str):
        if not self.watching:
            return
        self.presenter.paste(text)
        self._replace_input(text)

    # ── Logging ───────────────────────────────────────────────────────────────

    def _log(self, message: str, tag: str = "info", stage: str = ""):
        if self._db:
            self._db.log(message, tag, stage)

        def _write():
            self.log.config(state=tk.NORMAL)
            ts = datetime.now().strftime("%H:%M:%S")
            self.log.insert(tk.END, f"[{ts}] ", "ts")
            self.log.insert(tk.END, f"{message}\n", tag)
            line_count = int(self.log.index("end-1c").split(".")[0])
            if line_count > self.settings.log_lines:
                self.log.delete("1.0", f"{line_count - self.settings.log_lines}.0")
            self.log.config(state=tk.DISABLED)
            self.log.see(tk.END)
        self.root.after(0, _write)

    def _set_status(self, text: str):
        self.root.after(0, lambda: self.statusbar.config(text=text))

    def _on_close(self):
        self.watching = False
        if self._db:
            self._db.stop()
        self.root.destroy()


# ─── Entry point ──────────────────────────────────────────────────────────────

def main(argv=None):
    try:
        settings = load_settings(argv)
    except SettingsError as exc:
        print(f"b64view: {exc}", file=sys.stderr)
        sys.exit(2)

    root = tk.Tk()
    B64ViewApp(root, settings)
    root.mainloop()


if __name__ == "__main__":
    main()
