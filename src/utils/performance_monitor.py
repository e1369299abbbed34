# ========================
# src/utils/performance_monitor.py
# ========================

"""
Performance Monitoring Utilities

Tracks wall time, resident memory and per-stage checkpoints for a pipeline
run.
"""

import logging
import os
import time
from contextlib import contextmanager
from typing import Any, Dict, Optional

import psutil

logger = logging.getLogger(__name__)


class PerformanceMonitor:
    """
    Performance monitor for one pipeline run.
    """

    def __init__(self, name: str = "ETL"):
        """
        Initialize performance monitor.

        Args:
            name (str): Name for this monitoring session
        """
        self.name = name
        self.start_time = None
        self.end_time = None
        self.peak_memory_mb = 0.0
        self.records_processed = 0
        self.checkpoints = []
        self._process = psutil.Process(os.getpid())
        self._last_checkpoint_time = None
        self.summary = None

        logger.debug(f"PerformanceMonitor initialized: {name}")

    def start_monitoring(self) -> None:
        self.start_time = time.perf_counter()
        self._last_checkpoint_time = self.start_time
        self.peak_memory_mb = self._get_memory_usage_mb()
        logger.info(f"{self.name} - Performance monitoring started "
                    f"(memory: {self.peak_memory_mb:.2f} MB)")

    def update_progress(self, records: int) -> None:
        """Count records handled by a stage and sample memory."""
        self.records_processed += records
        self.peak_memory_mb = max(self.peak_memory_mb, self._get_memory_usage_mb())

    def add_checkpoint(self, name: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Record the end of a stage.

        Args:
            name (str): Stage name
            metadata (dict): Optional metadata, e.g. row counts
        """
        now = time.perf_counter()
        memory_mb = self._get_memory_usage_mb()
        self.peak_memory_mb = max(self.peak_memory_mb, memory_mb)
        checkpoint = {
            'name': name,
            'stage_seconds': now - (self._last_checkpoint_time or now),
            'memory_mb': memory_mb,
            'metadata': metadata or {}
        }
        self._last_checkpoint_time = now
        self.checkpoints.append(checkpoint)
        logger.debug(f"Checkpoint '{name}': {checkpoint}")

    def stop_monitoring(self) -> Dict[str, Any]:
        """
        Stop monitoring and return performance summary.

        Returns:
            dict: Performance statistics
        """
        self.end_time = time.perf_counter()
        total_time = self.end_time - self.start_time if self.start_time else 0.0

        summary = {
            'name': self.name,
            'total_processing_time_seconds': total_time,
            'records_processed': self.records_processed,
            'peak_memory_usage_mb': self.peak_memory_mb,
            'checkpoints': self.checkpoints
        }
        self.summary = summary
        logger.info(
            f"{self.name} - Finished in {total_time:.3f}s, "
            f"{self.records_processed:,} records, "
            f"peak memory {self.peak_memory_mb:.2f} MB"
        )
        return summary

    def _get_memory_usage_mb(self) -> float:
        return self._process.memory_info().rss / (1024 * 1024)


@contextmanager
def monitor_performance(name: str = "ETL"):
    """
    Context manager for performance monitoring.

    The summary is available as monitor.summary once the block exits.

    Args:
        name (str): Name for this monitoring session

    Yields:
        PerformanceMonitor: Monitor instance
    """
    monitor = PerformanceMonitor(name)
    monitor.start_monitoring()
    try:
        yield monitor
    finally:
        monitor.stop_monitoring()
