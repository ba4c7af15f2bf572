"""Order numbers: ``ORD-<epoch milliseconds>-<5 base-36 characters>``.

The generator remembers every suffix it issued for the current millisecond
and draws again on a repeat, so one process never hands out the same number
twice. Numbers from other processes are caught by the store's uniqueness
check at placement time.
"""

import secrets
import string
import threading
import time

ALPHABET = string.digits + string.ascii_uppercase
SUFFIX_LENGTH = 5
PREFIX = "ORD"


class OrderNumberGenerator:
    def __init__(self, clock=None, choice=None):
        self._clock = clock or time.time
        self._choice = choice or secrets.choice
        self._lock = threading.Lock()
        self._millis = None
        self._issued = set()

    def next(self) -> str:
        with self._lock:
            millis = int(self._clock() * 1000)
            if millis != self._millis:
                self._millis = millis
                self._issued = set()

            suffix = self._draw()
            while suffix in self._issued:
                suffix = self._draw()
            self._issued.add(suffix)

        return f"{PREFIX}-{millis}-{suffix}"

    def _draw(self):
        return "".join(self._choice(ALPHABET) for _ in range(SUFFIX_LENGTH))


order_numbers = OrderNumberGenerator()
