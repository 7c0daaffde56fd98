from __future__ import annotations

import time
from typing import Callable, Optional

from loancheck.core.stores import KeyValueStore

TOKEN_KEY = "veritec_token"
EXPIRY_KEY = "veritec_token_expiry"


def epoch_millis() -> int:
    return int(time.time() * 1000)


class TokenCache:
    """Bearer token plus its absolute expiry (epoch millis) kept in a key/value store.

    Reads re-validate against the clock on every call. Stale entries are left in
    place; `invalidate` overwrites both entries with blanks rather than deleting
    them, so the next read misses whatever the clock says.
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], int] = epoch_millis) -> None:
        self.store = store
        self._clock = clock

    def save(self, token: str, expires_in_seconds: float) -> None:
        expiry = int(self._clock() + float(expires_in_seconds) * 1000)
        self.store.set(TOKEN_KEY, token)
        self.store.set(EXPIRY_KEY, str(expiry))

    def read_valid(self) -> Optional[str]:
        token = self.store.get(TOKEN_KEY)
        expiry_raw = self.store.get(EXPIRY_KEY)
        if not token or not expiry_raw:
            return None
        try:
            expiry = float(expiry_raw)
        except ValueError:
            return None
        if self._clock() > expiry:
            return None
        return token

    def invalidate(self) -> None:
        self.store.set(TOKEN_KEY, "")
        self.store.set(EXPIRY_KEY, "0")
