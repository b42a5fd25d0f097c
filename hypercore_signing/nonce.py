"""Nonce allocation.

Hyperliquid nonces are millisecond timestamps. The exchange keeps the highest
100 nonces per signer and rejects a nonce that is lower than all of them or
too far from the current time.
"""

import logging
import threading
import time
from typing import Callable

from hypercore_signing.constants import NONCE_RESYNC_THRESHOLD_MS

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Wall clock in milliseconds."""
    return time.time_ns() // 1_000_000


class NonceHandler:
    """Allocate unique, increasing nonces close to the wall clock.

    - Each call to :py:meth:`allocate_nonce` returns a value larger than any before it

    - When the counter falls more than 300 ms behind the clock it jumps forward to the clock

    - Thread safe, one handler can be shared by all signers of a process

    Example:

    .. code-block:: python

        nonces = NonceHandler()
        signed = sign_action(signer, action, nonce=nonces.allocate_nonce(), network=network)
    """

    def __init__(self, clock: Callable[[], int] = now_ms, resync_threshold: int = NONCE_RESYNC_THRESHOLD_MS):
        """
        :param clock:
            Returns the current time in milliseconds.

        :param resync_threshold:
            Milliseconds the counter may lag behind the clock.
        """
        self.clock = clock
        self.resync_threshold = resync_threshold
        self.current_nonce = clock()
        self.lock = threading.Lock()

    def __repr__(self):
        return f"<NonceHandler current:{self.current_nonce}>"

    def allocate_nonce(self) -> int:
        """Get the next nonce."""
        with self.lock:
            now = self.clock()
            if self.current_nonce + self.resync_threshold < now:
                logger.debug("Nonce counter %d behind clock %d, resyncing", self.current_nonce, now)
                self.current_nonce = now
            else:
                self.current_nonce += 1
            return self.current_nonce
