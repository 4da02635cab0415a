"""Base orchestrator for pipeline execution.

Provides the lifecycle shared by pipeline orchestrators:
- initialize(): load state and open clients
- _run_pipeline(): the pipeline itself
- shutdown(): persist state and release resources, always called
- timing and a final summary

Usage:
    class MyOrchestrator(BaseOrchestrator):
        async def initialize(self): ...
        async def _run_pipeline(self): ...
        async def shutdown(self): ...
        def _log_summary(self, elapsed): ...
"""

from __future__ import annotations

import asyncio
import signal
import time
from abc import ABC, abstractmethod

from starboard_archive.archive.logger import logger

STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class BaseOrchestrator(ABC):
    """Abstract base class for pipeline orchestrators.

    Subclasses check ``stop_requested`` (or await ``stop_event``) at safe
    points; SIGINT and SIGTERM set it while run() is active.
    """

    def __init__(self) -> None:
        self.start_time: float = 0.0
        self.stop_event = asyncio.Event()

    @property
    def stop_requested(self) -> bool:
        return self.stop_event.is_set()

    def request_stop(self) -> None:
        if not self.stop_event.is_set():
            logger.warning("Stop requested, finishing up...")
        self.stop_event.set()

    def _install_signal_handlers(self) -> list[signal.Signals]:
        loop = asyncio.get_running_loop()
        installed: list[signal.Signals] = []
        for sig in STOP_SIGNALS:
            try:
                loop.add_signal_handler(sig, self.request_stop)
            except (NotImplementedError, RuntimeError):
                # Event loops without signal support fall back to
                # KeyboardInterrupt, which still reaches shutdown().
                continue
            installed.append(sig)
        return installed

    def _remove_signal_handlers(self, installed: list[signal.Signals]) -> None:
        loop = asyncio.get_running_loop()
        for sig in installed:
            loop.remove_signal_handler(sig)

    async def run(self) -> None:
        """Run the pipeline: initialize, execute, then always shut down."""
        self.start_time = time.time()
        installed = self._install_signal_handlers()
        try:
            try:
                await self.initialize()
                await self._run_pipeline()
            finally:
                await self.shutdown()
        finally:
            self._remove_signal_handlers(installed)

        elapsed = time.time() - self.start_time
        self._log_summary(elapsed)

    @abstractmethod
    async def initialize(self) -> None:
        """Load state and open resources before the pipeline runs."""
        ...

    @abstractmethod
    async def _run_pipeline(self) -> None:
        """Execute the pipeline logic."""
        ...

    @abstractmethod
    async def shutdown(self) -> None:
        """Persist state and release resources. Must be safe to repeat."""
        ...

    @abstractmethod
    def _log_summary(self, elapsed: float) -> None:
        """Log the final summary statistics.

        Args:
            elapsed: Total time elapsed in seconds.
        """
        ...
