#!/usr/bin/env python3
"""
presenter.py - View state and actions for the B64View window.

The Presenter owns one immutable ViewState and replaces it on every action:

    set_input(text)   re-run the pipeline on the new raw input
    paste(text)       same as set_input, logged as a paste
    clear()           reset input, result and copy feedback
    copy()            export the formatted output, show "Copied!"/"Failed"

Copy feedback expires after feedback_ms via the injected scheduler
(Tk's root.after in the app). Every copy takes a new ticket; only the reset
scheduled by the latest ticket is applied.
"""

from dataclasses import dataclass, field, replace

from pipeline import Empty, Failure, Result, Success, run_pipeline

COPIED = "Copied!"
FAILED = "Failed"
FEEDBACK_MS = 2000


@dataclass(frozen=True)
class ViewState:
    raw_input: str = ""
    result: Result = field(default_factory=Empty)
    copy_feedback: str = ""

    @property
    def output(self) -> str:
        return self.result.output if isinstance(self.result, Success) else ""

    @property
    def error(self) -> str:
        return self.result.message if isinstance(self.result, Failure) else ""

    @property
    def can_copy(self) -> bool:
        return isinstance(self.result, Success) and bool(self.result.output)


def _no_log(message: str, tag: str = "info", stage: str = ""):
    pass


class Presenter:
    def __init__(self, exporter, scheduler, feedback_ms: int = FEEDBACK_MS,
                 on_change=None, log=None):
        self._exporter    = exporter
        self._scheduler   = scheduler
        self.feedback_ms  = feedback_ms
        self._on_change   = on_change
        self._log         = log or _no_log
        self._ticket      = 0
        self._state       = ViewState()

    @property
    def state(self) -> ViewState:
        return self._state

    def _set_state(self, state: ViewState):
        self._state = state
        if self._on_change:
            self._on_change(state)

    # ── Actions ───────────────────────────────────────────────────────────────

    def set_input(self, text: str):
        if text == self._state.raw_input:
            return
        result = run_pipeline(text)
        self._set_state(replace(self._state, raw_input=text, result=result))
        self._log_result(result, len(text))

    def paste(self, text: str):
        self._log(f"Pasted {len(text)} chars", "info", "paste")
        self.set_input(text)

    def clear(self):
        self._set_state(ViewState())
        self._log("Cleared", "info", "clear")

    def copy(self) -> bool:
        if not self._state.can_copy:
            return False

        ok = self._exporter(self._state.output)
        self._ticket += 1
        ticket = self._ticket
        self._set_state(replace(self._state, copy_feedback=COPIED if ok else FAILED))
        self._scheduler(self.feedback_ms, lambda: self._expire_feedback(ticket))

        if ok:
            self._log(f"✓ {len(self._state.output)} chars copied to clipboard", "ok", "copy")
        else:
            self._log("✗ Clipboard copy failed", "err", "copy")
        return ok

    def _expire_feedback(self, ticket: int):
        if ticket != self._ticket or not self._state.copy_feedback:
            return
        self._set_state(replace(self._state, copy_feedback=""))

    # ── Logging ───────────────────────────────────────────────────────────────

    def _log_result(self, result: Result, length: int):
        if isinstance(result, Success):
            self._log(f"✓ Decoded {length} chars -> {len(result.output)} chars of JSON",
                      "ok", "format")
        elif isinstance(result, Failure):
            self._log(f"✗ {result.kind.value}: {result.message}", "err", result.kind.value)
        else:
            self._log("Input is blank", "info", "")
