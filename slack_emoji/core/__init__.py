"""Base orchestrator for sync execution.

Provides common infrastructure for sync orchestrators:
- Timing and statistics tracking
- Common run() interface

Usage:
    class MyOrchestrator(BaseOrchestrator):
        async def _run_pipeline(self):
            # Implementation
            pass

        def _log_summary(self, elapsed):
            # Log final statistics
            pass
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod


class BaseOrchestrator(ABC):
    """Abstract base class for sync orchestrators.

    Subclasses must implement:
    - _run_pipeline(): The actual sync logic
    - _log_summary(): Log final statistics
    """

    def __init__(self) -> None:
        self.start_time: float = 0.0
        self.elapsed: float = 0.0

    async def run(self) -> None:
        """Run the pipeline and log its summary."""
        self.start_time = time.time()

        await self._run_pipeline()

        self.elapsed = time.time() - self.start_time
        self._log_summary(self.elapsed)

    @abstractmethod
    async def _run_pipeline(self) -> None:
        """Execute the pipeline logic."""
        ...

    @abstractmethod
    def _log_summary(self, elapsed: float) -> None:
        """Log the final summary statistics.

        Args:
            elapsed: Total time elapsed in seconds.
        """
        ...
