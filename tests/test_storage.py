# ========================
# tests/test_storage.py
# ========================

import unittest
import tempfile
import json
import os
import sys
from pathlib import Path

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.etl.formatting import OUTPUT_HEADER
from src.etl.storage import CSVSink, DataSaver, SQLiteSink, read_results


class TestSinks(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.output_dir = Path(self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_csv_sink_writes_lines_verbatim(self):
        lines = [OUTPUT_HEADER, "1,30.00,3.00\n", "3,20.00,2.00\n"]
        path = CSVSink(self.output_dir / "output.csv").write(lines)

        with open(path, encoding='utf-8', newline='') as f:
            content = f.read()
        self.assertEqual(content, "order_id,total_amount,total_taxes\n1,30.00,3.00\n3,20.00,2.00\n")

    def test_sqlite_sink_creates_table_and_inserts(self):
        db_path = self.output_dir / "output.db3"
        SQLiteSink(db_path).write([("1", "30.00", "3.00"), ("2", "15.00", "1.50")])

        self.assertEqual(read_results(db_path), [(1, 30.0, 3.0), (2, 15.0, 1.5)])

    def test_sqlite_sink_rerun_replaces_rows(self):
        db_path = self.output_dir / "output.db3"
        sink = SQLiteSink(db_path)
        sink.write([("1", "30.00", "3.00")])
        sink.write([("1", "31.00", "3.10"), ("4", "5.00", "0.50")])

        self.assertEqual(read_results(db_path), [(1, 31.0, 3.1), (4, 5.0, 0.5)])

    def test_sqlite_sink_rerun_drops_stale_rows(self):
        db_path = self.output_dir / "output.db3"
        sink = SQLiteSink(db_path)
        sink.write([("1", "30.00", "3.00"), ("2", "10.00", "1.00"), ("3", "7.50", "0.75")])
        sink.write([("2", "12.00", "1.20")])

        self.assertEqual(read_results(db_path), [(2, 12.0, 1.2)])

    def test_sqlite_sink_empty_rerun_clears_table(self):
        db_path = self.output_dir / "output.db3"
        sink = SQLiteSink(db_path)
        sink.write([("1", "30.00", "3.00")])
        sink.write([])

        self.assertEqual(read_results(db_path), [])

    def test_data_saver_save_all(self):
        saver = DataSaver(str(self.output_dir / "run"), csv_file="out.csv", db_file="out.db3")
        saved = saver.save_all([OUTPUT_HEADER, "1,30.00,3.00\n"], [("1", "30.00", "3.00")])

        self.assertEqual(set(saved), {'csv', 'sqlite'})
        self.assertTrue(Path(saved['csv']).exists())
        self.assertEqual(Path(saved['sqlite']).name, "out.db3")
        self.assertEqual(read_results(saved['sqlite']), [(1, 30.0, 3.0)])

    def test_save_summary(self):
        saver = DataSaver(str(self.output_dir))
        path = saver.save_summary({'pipeline_status': 'completed', 'counts': {'joined_rows': 4}})

        with open(path, encoding='utf-8') as f:
            summary = json.load(f)
        self.assertEqual(summary['counts']['joined_rows'], 4)


if __name__ == '__main__':
    unittest.main()
