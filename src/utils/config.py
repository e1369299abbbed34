# ========================
# src/utils/config.py
# ========================

"""
Configuration Management

Centralized configuration for the ETL pipeline with environment support.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

ORDERS_URL = (
    "https://raw.githubusercontent.com/RafaelMALima/ProgramacaoFuncional-ETL/"
    "refs/heads/main/order.csv"
)
ORDER_ITEMS_URL = (
    "https://raw.githubusercontent.com/RafaelMALima/ProgramacaoFuncional-ETL/"
    "refs/heads/main/order_item.csv"
)


class Config:
    """
    Configuration class for the ETL pipeline.
    Supports environment variables and default values.
    """

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize configuration.

        Args:
            config_dict (dict): Optional configuration overrides
        """
        # Sources (local path or http(s) URL)
        self.ORDERS_SOURCE = os.getenv('ETL_ORDERS_SOURCE', ORDERS_URL)
        self.ORDER_ITEMS_SOURCE = os.getenv('ETL_ORDER_ITEMS_SOURCE', ORDER_ITEMS_URL)
        self.HTTP_TIMEOUT_SECONDS = float(os.getenv('ETL_HTTP_TIMEOUT', '30'))

        # Outputs
        self.DEFAULT_OUTPUT_DIR = os.getenv('ETL_OUTPUT_DIR', 'data/processed')
        self.OUTPUT_CSV_FILE = os.getenv('ETL_OUTPUT_CSV', 'output.csv')
        self.OUTPUT_DB_FILE = os.getenv('ETL_OUTPUT_DB', 'output.db3')

        # Logging
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
        self.LOG_DIR = os.getenv('ETL_LOG_DIR', 'logs')
        self.LOG_FILE = os.getenv('ETL_LOG_FILE', 'etl.log')

        # API
        self.API_PORT = int(os.getenv('ETL_API_PORT', '8000'))
        self.API_MAX_RUNS = int(os.getenv('ETL_API_MAX_RUNS', '100'))

        if config_dict:
            self._update_from_dict(config_dict)

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration from dictionary."""
        for key, value in config_dict.items():
            if hasattr(self, key.upper()):
                setattr(self, key.upper(), value)

    def get_data_paths(self) -> Dict[str, Path]:
        """Get all configured output paths as Path objects."""
        output_dir = Path(self.DEFAULT_OUTPUT_DIR)
        return {
            'output_dir': output_dir,
            'output_csv': output_dir / self.OUTPUT_CSV_FILE,
            'output_db': output_dir / self.OUTPUT_DB_FILE,
            'logs_dir': Path(self.LOG_DIR),
        }

    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        for path_name, path in self.get_data_paths().items():
            if path_name.endswith('_dir'):
                path.mkdir(parents=True, exist_ok=True)

    def validate_config(self) -> Dict[str, bool]:
        """
        Validate configuration values.

        Returns:
            dict: Validation results for each setting
        """
        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        return {
            'orders_source': bool(self.ORDERS_SOURCE),
            'order_items_source': bool(self.ORDER_ITEMS_SOURCE),
            'http_timeout': self.HTTP_TIMEOUT_SECONDS > 0,
            'output_files': bool(self.OUTPUT_CSV_FILE) and bool(self.OUTPUT_DB_FILE),
            'api_port': 1000 <= self.API_PORT <= 65535,
            'api_max_runs': self.API_MAX_RUNS >= 1,
            'log_level': str(self.LOG_LEVEL).upper() in valid_log_levels,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            attr: getattr(self, attr)
            for attr in dir(self)
            if attr.isupper() and not callable(getattr(self, attr))
        }

    def save_to_file(self, file_path: str) -> None:
        """Save configuration to JSON file."""
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

    @classmethod
    def load_from_file(cls, file_path: str) -> 'Config':
        """Load configuration from JSON file."""
        with open(file_path, 'r') as f:
            config_dict = json.load(f)
        return cls(config_dict)

    def __str__(self) -> str:
        lines = ["Configuration Settings:"]
        for key, value in sorted(self.to_dict().items()):
            lines.append(f"  {key}: {value}")
        return "\n".join(lines)
