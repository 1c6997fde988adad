#!/usr/bin/env python3
"""
db_logger.py - Optional SQLite mirror of the B64View activity log.

Off unless --log-db / log_db is set. Each window run gets a short run id;
rows go through a queue to one writer thread so the Tk thread never blocks
on SQLite. Only event text is stored (stage, outcome, lengths), never the
pasted input. Rows older than RETAIN_DAYS are deleted when a run starts.

Table:
    events(id, run_id, logged_at, tag, stage, message)
"""

import sqlite3
import sys
import threading
import queue
import uuid
from datetime import datetime, timedelta

RETAIN_DAYS = 30

_SCHEMA = """
    CREATE TABLE IF NOT EXISTS events (
        id         INTEGER PRIMARY KEY AUTOINCREMENT,
        run_id     TEXT NOT NULL,
        logged_at  TEXT NOT NULL,
        tag        TEXT NOT NULL,
        stage      TEXT NOT NULL DEFAULT '',
        message    TEXT NOT NULL
    );
    CREATE INDEX IF NOT EXISTS idx_events_logged_at ON events(logged_at);
"""


class DBLogger:
    def __init__(self, db_path: str):
        self.db_path  = str(db_path)
        self.run_id   = uuid.uuid4().hex[:8]
        self._queue   = queue.Queue()

        cutoff = (datetime.now() - timedelta(days=RETAIN_DAYS)).isoformat()
        with sqlite3.connect(self.db_path) as conn:
            conn.executescript(_SCHEMA)
            conn.execute("DELETE FROM events WHERE logged_at < ?", (cutoff,))

        self._writer = threading.Thread(target=self._drain, daemon=True)
        self._writer.start()

    def _drain(self):
        conn = sqlite3.connect(self.db_path)
        try:
            while True:
                row = self._queue.get()
                try:
                    if row is None:
                        return
                    with conn:
                        conn.execute(
                            "INSERT INTO events(run_id, logged_at, tag, stage, message)"
                            " VALUES(?,?,?,?,?)",
                            row,
                        )
                except sqlite3.Error as exc:
                    print(f"b64view: log write to {self.db_path} failed: {exc}",
                          file=sys.stderr)
                finally:
                    self._queue.task_done()
        finally:
            conn.close()

    def log(self, message: str, tag: str = "info", stage: str = ""):
        self._queue.put((self.run_id, datetime.now().isoformat(), tag, stage, message))

    def flush(self):
        """Block until every queued row has been written."""
        self._queue.join()

    def stop(self):
        if self._writer.is_alive():
            self._queue.put(None)
            self._writer.join(timeout=3)
