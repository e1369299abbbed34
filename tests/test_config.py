# ========================
# tests/test_config.py
# ========================

import unittest
import tempfile
import os
import sys
from pathlib import Path
from unittest import mock

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.utils.config import Config, ORDERS_URL
from src.utils.performance_monitor import monitor_performance


class TestConfig(unittest.TestCase):

    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            config = Config()

        self.assertEqual(config.ORDERS_SOURCE, ORDERS_URL)
        self.assertEqual(config.OUTPUT_CSV_FILE, "output.csv")
        self.assertEqual(config.OUTPUT_DB_FILE, "output.db3")
        self.assertTrue(all(config.validate_config().values()))

    def test_environment_overrides(self):
        with mock.patch.dict(os.environ, {'ETL_ORDERS_SOURCE': 'data/order.csv', 'ETL_HTTP_TIMEOUT': '5'}):
            config = Config()

        self.assertEqual(config.ORDERS_SOURCE, 'data/order.csv')
        self.assertEqual(config.HTTP_TIMEOUT_SECONDS, 5.0)

    def test_dict_overrides_ignore_unknown_keys(self):
        config = Config({'output_csv_file': 'results.csv', 'no_such_setting': 1})

        self.assertEqual(config.OUTPUT_CSV_FILE, 'results.csv')
        self.assertFalse(hasattr(config, 'NO_SUCH_SETTING'))

    def test_invalid_values_are_reported(self):
        config = Config({'log_level': 'LOUD', 'api_port': 80})
        validations = config.validate_config()

        self.assertFalse(validations['log_level'])
        self.assertFalse(validations['api_port'])

    def test_save_and_load_round_trip(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "config.json"
            Config({'default_output_dir': 'out'}).save_to_file(str(path))
            loaded = Config.load_from_file(str(path))

        self.assertEqual(loaded.DEFAULT_OUTPUT_DIR, 'out')

    def test_ensure_directories(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config = Config({
                'default_output_dir': str(Path(temp_dir) / 'processed'),
                'log_dir': str(Path(temp_dir) / 'logs'),
            })
            config.ensure_directories()

            self.assertTrue((Path(temp_dir) / 'processed').is_dir())
            self.assertTrue((Path(temp_dir) / 'logs').is_dir())
            self.assertFalse((Path(temp_dir) / 'processed' / 'output.csv').exists())


class TestPerformanceMonitor(unittest.TestCase):

    def test_checkpoints_and_summary(self):
        with monitor_performance("test") as monitor:
            monitor.update_progress(10)
            monitor.add_checkpoint('decode', {'orders': 3})

        summary = monitor.summary
        self.assertEqual(summary['name'], 'test')
        self.assertEqual(summary['records_processed'], 10)
        self.assertEqual(summary['checkpoints'][0]['name'], 'decode')
        self.assertEqual(summary['checkpoints'][0]['metadata'], {'orders': 3})
        self.assertGreater(summary['peak_memory_usage_mb'], 0)


if __name__ == '__main__':
    unittest.main()
