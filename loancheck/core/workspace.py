from __future__ import annotations

import threading
from typing import List, Optional

from loancheck.core.models import CsvRow, EligibilityOutcome


class Workspace:
    """Operator session state: uploaded rows, the last bulk run and the session token.

    A new upload replaces the row set and a new run replaces the outcomes; nothing
    is merged.
    """

    def __init__(self) -> None:
        self._rows: List[CsvRow] = []
        self._outcomes: List[EligibilityOutcome] = []
        self._last_signal: Optional[str] = None
        self._session_token: Optional[str] = None
        self._lock = threading.Lock()

    def replace_rows(self, rows: List[CsvRow]) -> None:
        with self._lock:
            self._rows = list(rows)

    def rows(self) -> List[CsvRow]:
        with self._lock:
            return list(self._rows)

    def row(self, row_id: int) -> Optional[CsvRow]:
        with self._lock:
            for row in self._rows:
                if row.id == row_id:
                    return row
        return None

    def record_run(self, outcomes: List[EligibilityOutcome], signal: Optional[str]) -> None:
        with self._lock:
            self._outcomes = list(outcomes)
            self._last_signal = signal

    def outcomes(self) -> List[EligibilityOutcome]:
        with self._lock:
            return list(self._outcomes)

    def last_signal(self) -> Optional[str]:
        with self._lock:
            return self._last_signal

    def session_token(self) -> Optional[str]:
        with self._lock:
            return self._session_token

    def set_session_token(self, token: Optional[str]) -> None:
        with self._lock:
            self._session_token = token
