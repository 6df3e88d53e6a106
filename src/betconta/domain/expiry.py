"""Periodic expiry of PIX keys older than the key lifetime."""

import logging
import threading
from datetime import datetime
from typing import Optional

from betconta.database.base import Database
from betconta.domain.pix import PIX_KEY_LIFETIME
from betconta.utils.clock import as_utc, utcnow

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL = 300.0


class ExpiryScanner:
    """Closes active PIX keys whose age exceeds PIX_KEY_LIFETIME.

    The close is a guarded update on ``is_active``, so a key deactivated
    manually between scans is never touched again.
    """

    def __init__(self, db: Database):
        self.db = db

    def sweep(self, now: Optional[datetime] = None) -> int:
        """Close every active key at least PIX_KEY_LIFETIME old.

        Returns:
            Number of keys closed
        """
        now = as_utc(now) if now is not None else utcnow()
        cutoff = now - PIX_KEY_LIFETIME
        closed = self.db.close_expired_pix_keys(cutoff=cutoff, now=now)
        if closed:
            logger.info("Expired %d PIX key(s) created before %s", closed, cutoff.isoformat())
        else:
            logger.debug("No PIX keys to expire (cutoff %s)", cutoff.isoformat())
        return closed

    def run(
        self,
        interval: float = DEFAULT_SWEEP_INTERVAL,
        stop_event: Optional[threading.Event] = None,
        max_sweeps: Optional[int] = None,
    ) -> int:
        """Sweep repeatedly until stop_event is set or max_sweeps is reached.

        A failing sweep is logged and the loop carries on with the next one.

        Args:
            interval: Seconds to wait between sweeps
            stop_event: Event that ends the loop when set
            max_sweeps: Stop after this many sweeps (None runs until stopped)

        Returns:
            Total number of keys closed
        """
        if interval <= 0:
            raise ValueError("Sweep interval must be positive")
        stop_event = stop_event or threading.Event()

        total = 0
        sweeps = 0
        logger.info("Starting PIX expiry loop (interval %.0fs)", interval)
        while not stop_event.is_set():
            try:
                total += self.sweep()
            except Exception:
                logger.exception("PIX expiry sweep failed")
            sweeps += 1
            if max_sweeps is not None and sweeps >= max_sweeps:
                break
            stop_event.wait(interval)

        logger.info("PIX expiry loop stopped after %d sweep(s), %d key(s) closed", sweeps, total)
        return total
