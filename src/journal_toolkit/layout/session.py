"""
Module: layout.session

Purpose:
    Background re-pagination for interactive editing. Every edit submits
    a new layout pass; passes run on a thread pool and only the newest
    one may commit its result.

Key Classes:
    - PaginationSession: Thread pool-based last-write-wins layout runner

Rules:
    1. Each submit() gets a generation number
    2. A pass commits only if no newer pass was submitted meanwhile
    3. A pass whose measurement fails is discarded; the previously
       committed result stays current (never a partial layout)

Dependencies:
    - concurrent.futures: Thread pool execution
    - measurement.oracle: MeasurementError

Used By:
    - Editors and previews that re-layout on every change
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional

from ..core.models.paper import StructuredPaperData
from ..core.models.template import TemplateConfig
from ..measurement.oracle import MeasurementError, MeasurementOracle
from .models import LayoutResult

logger = logging.getLogger(__name__)

LayoutFn = Callable[[StructuredPaperData, TemplateConfig, Optional[MeasurementOracle]], LayoutResult]


class PaginationSession:
    """
    Last-write-wins layout runner.

    Usage:
        with PaginationSession(oracle) as session:
            session.submit(paper, config)
            session.submit(paper, config.patch("layout", column_count=1))
            ...
            result = session.current

    Attributes:
        current: Last committed LayoutResult (None before the first commit)
        generation: Generation number of the committed result (0 = none)
    """

    def __init__(
        self,
        oracle: Optional[MeasurementOracle] = None,
        *,
        layout_fn: Optional[LayoutFn] = None,
        on_commit: Optional[Callable[[LayoutResult], None]] = None,
        max_workers: int = 1,
    ):
        """
        Initialize the session.

        Args:
            oracle: Measurement oracle passed to every pass
            layout_fn: Layout pipeline; defaults to controller.layout_paper
            on_commit: Called (on the worker thread) after each commit
            max_workers: Concurrent passes
        """
        if layout_fn is None:
            from ..controller import layout_paper
            layout_fn = layout_paper
        self._oracle = oracle
        self._layout_fn = layout_fn
        self._on_commit = on_commit
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="pagination")
        self._lock = threading.Lock()
        self._submitted = 0
        self._committed = 0
        self._current: Optional[LayoutResult] = None
        self._last_error: Optional[MeasurementError] = None

    @property
    def current(self) -> Optional[LayoutResult]:
        with self._lock:
            return self._current

    @property
    def generation(self) -> int:
        with self._lock:
            return self._committed

    @property
    def last_error(self) -> Optional[MeasurementError]:
        """Measurement failure of the most recent failed pass, if any."""
        with self._lock:
            return self._last_error

    def submit(self, data: StructuredPaperData, config: TemplateConfig) -> Future:
        """
        Queue a layout pass.

        Returns:
            Future resolving to the pass's LayoutResult, or to the
            retained committed result when measurement failed
        """
        with self._lock:
            self._submitted += 1
            generation = self._submitted
        logger.debug(f"Submitting layout pass {generation}")
        return self._executor.submit(self._run, generation, data, config)

    def _run(
        self,
        generation: int,
        data: StructuredPaperData,
        config: TemplateConfig,
    ) -> Optional[LayoutResult]:
        try:
            result = self._layout_fn(data, config, self._oracle)
        except MeasurementError as e:
            logger.warning(f"Layout pass {generation} discarded, measurement failed: {e}")
            with self._lock:
                self._last_error = e
                return self._current

        with self._lock:
            if generation != self._submitted:
                logger.debug(f"Layout pass {generation} is stale, not committing")
                return result
            self._current = result
            self._committed = generation
            self._last_error = None

        logger.info(f"Committed layout pass {generation}: {result.page_count} pages")
        if self._on_commit is not None:
            self._on_commit(result)
        return result

    def close(self, wait: bool = True) -> None:
        """Shutdown the thread pool."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "PaginationSession":
        return self

    def __exit__(self, *args) -> None:
        self.close()
