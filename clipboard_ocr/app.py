"""Desktop window with "Get clipboard" / "Copy" buttons."""

from __future__ import annotations

import logging

from .clipboard import Clipboard
from .errors import ClipboardOcrError, ResolveError
from .resolver import ContentResolver

logger = logging.getLogger(__name__)


class ClipboardOcrController:
    """Turns button presses into display strings; errors become messages."""

    def __init__(self, resolver: ContentResolver, clipboard: Clipboard) -> None:
        self._resolver = resolver
        self._clipboard = clipboard

    def refresh(self) -> str:
        try:
            return self._resolver.resolve(self._clipboard)
        except ResolveError as exc:
            logger.warning("Clipboard resolution failed: %s", exc)
            return f"Error getting text from clipboard: {exc}"

    def copy(self, text: str) -> str:
        try:
            self._clipboard.set_text(text)
        except ClipboardOcrError as exc:
            logger.warning("Clipboard write failed: %s", exc)
            return f"Error setting text to clipboard: {exc}"
        logger.info("Copied %d characters to clipboard", len(text))
        return text


def run_window(controller: ClipboardOcrController, title: str = "Clipboard OCR") -> None:
    """Open the window and block in the Tk main loop until it is closed.

    Resolution runs on the UI thread, so the window does not repaint while
    OCR is in progress.
    """
    import tkinter as tk

    root = tk.Tk()
    root.title(title)
    root.geometry("640x360")

    toolbar = tk.Frame(root)
    toolbar.pack(side=tk.TOP, fill=tk.X, padx=4, pady=4)

    view = tk.Text(root, wrap=tk.WORD, state=tk.DISABLED)
    view.pack(fill=tk.BOTH, expand=True, padx=4, pady=(0, 4))

    current = {"text": ""}

    def _show(text: str) -> None:
        current["text"] = text
        view.configure(state=tk.NORMAL)
        view.delete("1.0", tk.END)
        view.insert("1.0", text)
        view.configure(state=tk.DISABLED)

    def _on_get() -> None:
        root.configure(cursor="watch")
        root.update_idletasks()
        try:
            _show(controller.refresh())
        finally:
            root.configure(cursor="")

    def _on_copy() -> None:
        _show(controller.copy(current["text"]))

    tk.Button(toolbar, text="Get clipboard", command=_on_get).pack(side=tk.LEFT)
    tk.Button(toolbar, text="Copy", command=_on_copy).pack(side=tk.LEFT, padx=(4, 0))

    root.mainloop()


__all__ = ["ClipboardOcrController", "run_window"]
