# ========================
# src/utils/__init__.py
# ========================

"""
Utilities Package

Configuration, logging and performance monitoring for the ETL pipeline.
"""

from .config import Config
from .performance_monitor import monitor_performance, PerformanceMonitor
from .logging_setup import setup_logging

__all__ = [
    'Config',
    'monitor_performance',
    'PerformanceMonitor',
    'setup_logging'
]
