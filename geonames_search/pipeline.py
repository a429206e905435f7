"""Batch harvester feeding GeoNames rows into the index."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from itertools import islice
from typing import Iterable, Iterator, Optional

from .config import HarvestConfig
from .documents import build_document
from .errors import IndexWriteError
from .schema import format_record, split_record

logger = logging.getLogger(__name__)


@dataclass
class HarvestReport:
    rows: int = 0
    indexed: int = 0
    failed: int = 0
    batches: int = 0
    commit_failures: int = 0
    optimize_failed: bool = False
    truncated: bool = False
    cancelled: bool = False
    elapsed: float = 0.0

    @property
    def rate(self) -> float:
        if self.rows == 0 or self.elapsed <= 0:
            return 0.0
        return self.rows / self.elapsed

    @property
    def clean(self) -> bool:
        return self.commit_failures == 0 and not self.optimize_failed


class IngestionPipeline:
    """Read lines in batches, build documents and commit after each batch.

    ``index`` only needs ``add_document``, ``commit`` and ``optimize``.
    """

    def __init__(self, lines: Iterable[str], index, config: HarvestConfig):
        self._lines: Iterator[str] = iter(lines)
        self.index = index
        self.config = config
        self.report = HarvestReport()

    def loop(self, count: int, verbose: bool = False, cancel: Optional[threading.Event] = None) -> int:
        """Process up to ``count`` lines and return how many were read."""
        read = 0
        for line in islice(self._lines, count):
            read += 1
            if verbose:
                logger.debug("Line: %d", read)
            self.process(split_record(line), verbose)
            if cancel is not None and cancel.is_set():
                break
        self.report.rows += read
        return read

    def process(self, row, verbose: bool = False) -> bool:
        if verbose:
            logger.debug("Record:\n%s", format_record(row))
        result = build_document(row, self.config.exclusions, self.config.country_boosts)
        if not result.ok:
            self._log_failure(row, result.error)
            return False
        document = result.document
        try:
            self.index.add_document(document.fields, document.boost)
        except Exception as exc:
            self._log_failure(row, exc)
            return False
        self.report.indexed += 1
        return True

    def _log_failure(self, row, error) -> None:
        self.report.failed += 1
        logger.error("Failed to add document:\n%s", format_record(row))
        logger.error("Cause: %s", error, exc_info=error)

    def commit(self) -> None:
        try:
            self.index.commit()
        except IndexWriteError:
            self.report.commit_failures += 1
            logger.exception("Commit failed")

    def optimize(self) -> None:
        try:
            self.index.optimize()
        except IndexWriteError:
            self.report.optimize_failed = True
            logger.exception("Optimize failed")

    def _has_more(self) -> bool:
        return next(self._lines, None) is not None

    def run(self, verbose: bool = False, cancel: Optional[threading.Event] = None) -> HarvestReport:
        batch_size = self.config.batch_size
        started = time.monotonic()
        read = 0
        for _ in range(self.config.max_batches):
            if cancel is not None and cancel.is_set():
                break
            read = self.loop(batch_size, verbose=verbose, cancel=cancel)
            self.report.batches += 1
            logger.info("Rows read: %d", self.report.rows)
            self.commit()
            if read != batch_size:
                break
        else:
            if read == batch_size and not (cancel and cancel.is_set()) and self._has_more():
                self.report.truncated = True
                logger.warning(
                    "Stopped after %d batches of %d rows; the rest of the input was not indexed",
                    self.config.max_batches,
                    batch_size,
                )
        if cancel is not None and cancel.is_set():
            self.report.cancelled = True
            logger.warning("Harvest cancelled after %d rows", self.report.rows)

        self.report.elapsed = time.monotonic() - started
        logger.info("Total time for execution: %.3fs", self.report.elapsed)
        logger.info("Total records processed: %d", self.report.rows)
        logger.info("Average records per second: %.1f", self.report.rate)

        self.commit()
        logger.info("Index optimize...")
        self.optimize()
        logger.info("... %s", "failed" if self.report.optimize_failed else "completed")
        return self.report
