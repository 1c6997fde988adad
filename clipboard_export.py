#!/usr/bin/env python3
"""
clipboard_export.py - Clipboard read/write helpers for B64View.

The primary writer is pyperclip. When pyperclip fails, typically with
PyperclipException because there is no usable clipboard mechanism (headless
or sandboxed sessions), the copy falls back to Tk's own
clipboard: an offscreen text field is created, filled, focused and selected,
and the <<Copy>> virtual event is fired on it. The field is always destroyed
again, whatever happens.
"""

from contextlib import contextmanager

import pyperclip


def copy_text(text: str, primary=pyperclip.copy, fallback=None) -> bool:
    """
    Write text to the clipboard. Returns True on success, False if every
    available mechanism failed. Clipboard errors never escape.
    """
    try:
        primary(text)
        return True
    except Exception:
        if fallback is None:
            return False
    try:
        return bool(fallback(text))
    except Exception:
        return False


def read_clipboard(reader=pyperclip.paste) -> str:
    try:
        return reader() or ""
    except pyperclip.PyperclipException:
        return ""


class HiddenFieldCopier:
    """Fallback copy through a temporary offscreen Tk text field."""

    def __init__(self, root, field_factory=None):
        if field_factory is None:
            from tkinter import Text as field_factory
        self._root    = root
        self._factory = field_factory

    @contextmanager
    def _temporary_field(self):
        field = self._factory(self._root, width=1, height=1)
        try:
            field.place(x=-9999, y=-9999)
            yield field
        finally:
            field.destroy()

    def __call__(self, text: str) -> bool:
        with self._temporary_field() as field:
            field.insert("1.0", text)
            field.focus_set()
            field.tag_add("sel", "1.0", "end-1c")
            field.event_generate("<<Copy>>")
            self._root.update_idletasks()
            return self._root.clipboard_get() == text
