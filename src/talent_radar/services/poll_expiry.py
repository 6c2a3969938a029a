"""Background sweep that closes polls once their expiry passes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from talent_radar.core.exceptions import StorageError
from talent_radar.core.settings import settings
from talent_radar.db.session import SessionLocal
from talent_radar.services.polls import expire_polls

logger = logging.getLogger(__name__)


class PollExpiryWorker:
    """Periodically deactivates expired polls while the application runs.

    Each sweep uses a fresh session and runs in a worker thread so the event
    loop is never blocked on the database.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        interval_seconds: float | None = None,
    ) -> None:
        """Initialize the worker.

        Args:
            session_factory: Callable returning a new database session.
            interval_seconds: Pause between sweeps; defaults to the configured interval.
        """
        self.session_factory = session_factory
        self.interval = max(
            0.01,
            float(
                interval_seconds
                if interval_seconds is not None
                else settings.poll_expiry_interval_seconds
            ),
        )
        self.sweeps = 0
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the background sweep loop."""
        if not self.running:
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())
            logger.info("Poll expiry worker started (every %.1fs)", self.interval)

    async def stop(self) -> None:
        """Stop the background sweep loop and wait for it to finish."""
        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None
        logger.info("Poll expiry worker stopped after %d sweep(s)", self.sweeps)

    def sweep_once(self) -> int:
        with self.session_factory() as db:
            return expire_polls(db)

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await asyncio.to_thread(self.sweep_once)
            except StorageError as e:
                logger.warning("Poll expiry sweep failed: %s", e.message)
            self.sweeps += 1

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval)
            except TimeoutError:
                continue
