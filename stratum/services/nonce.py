# stratum/services/nonce.py

"""Request id generator

Hands out strictly increasing integers, one per request, safe to share
between threads using the same client.
"""

import threading


class NonceGenerator:
    """Monotonic counter guarded by a lock"""

    def __init__(self, start: int = 0):
        self._lock = threading.Lock()
        self._value = start

    def next(self) -> int:
        """Increment the counter and return the new value"""
        with self._lock:
            self._value += 1
            return self._value

    def last(self) -> int:
        """Most recently issued value, without incrementing"""
        with self._lock:
            return self._value
