# ========================
# src/etl/storage.py
# ========================

"""
Data Storage Module

Sinks for the formatted results: a flat CSV file, an SQLite table and a
JSON run summary.
"""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

logger = logging.getLogger(__name__)

CREATE_RESULTS_TABLE = (
    "CREATE TABLE IF NOT EXISTS results "
    "(order_id INTEGER PRIMARY KEY, price FLOAT, tax FLOAT)"
)
CLEAR_RESULTS = "DELETE FROM results"
INSERT_RESULT = "INSERT OR REPLACE INTO results (order_id, price, tax) VALUES (?, ?, ?)"


class CSVSink:
    """Writes pre-formatted lines to a file, verbatim."""

    def __init__(self, file_path: Path):
        self.file_path = Path(file_path)

    def write(self, lines: Sequence[str]) -> str:
        """
        Write lines without adding separators.

        Args:
            lines: Lines that already carry their newline

        Returns:
            str: Path of the written file
        """
        try:
            with open(self.file_path, 'w', newline='', encoding='utf-8') as f:
                f.writelines(lines)
        except OSError as e:
            logger.error(f"Error writing CSV file {self.file_path}: {e}")
            raise

        logger.info(f"Saved {len(lines)} lines to {self.file_path}")
        return str(self.file_path)


class SQLiteSink:
    """Inserts (order_id, price, tax) rows into the results table."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)

    def write(self, rows: Sequence[Tuple[str, str, str]]) -> str:
        """
        Replace the contents of the results table with value rows.

        The table is cleared in the same transaction, so after a re-run it
        holds exactly the rows of the matching CSV output.

        Args:
            rows: (order_id, total_amount, total_taxes) as formatted strings

        Returns:
            str: Path of the database file
        """
        values = [(int(order_id), float(price), float(tax)) for order_id, price, tax in rows]
        conn = sqlite3.connect(self.db_path)
        try:
            with conn:
                conn.execute(CREATE_RESULTS_TABLE)
                conn.execute(CLEAR_RESULTS)
                conn.executemany(INSERT_RESULT, values)
        except sqlite3.Error as e:
            logger.error(f"Error writing results to {self.db_path}: {e}")
            raise
        finally:
            conn.close()

        logger.info(f"Inserted {len(values)} rows into {self.db_path}")
        return str(self.db_path)


def read_results(db_path: Path) -> List[Tuple[int, float, float]]:
    """Read back the results table, ordered by order_id."""
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute(
            "SELECT order_id, price, tax FROM results ORDER BY order_id"
        ).fetchall()
    finally:
        conn.close()


class DataSaver:
    """
    Saves one run's output to the output directory.
    """

    def __init__(self,
                 output_dir: str = "data/processed",
                 csv_file: str = "output.csv",
                 db_file: str = "output.db3"):
        """
        Initialize the data saver.

        Args:
            output_dir (str): Directory to save output files
            csv_file (str): Name of the CSV output file
            db_file (str): Name of the SQLite database file
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.csv_sink = CSVSink(self.output_dir / csv_file)
        self.sqlite_sink = SQLiteSink(self.output_dir / db_file)
        logger.info(f"DataSaver initialized with output directory: {self.output_dir}")

    def save_all(self,
                 csv_lines: Sequence[str],
                 value_rows: Sequence[Tuple[str, str, str]]) -> Dict[str, str]:
        """
        Write the CSV file and the SQLite table.

        Returns:
            dict: Mapping of output type to saved file path
        """
        saved_files = {
            'csv': self.csv_sink.write(csv_lines),
            'sqlite': self.sqlite_sink.write(value_rows),
        }
        logger.info(f"All data saved successfully to {len(saved_files)} files")
        return saved_files

    def save_summary(self, summary: Dict[str, Any]) -> str:
        """Save a run summary as JSON."""
        file_path = self.output_dir / "run_summary.json"

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(summary, f, indent=2, default=str)

        logger.info(f"Summary saved to {file_path}")
        return str(file_path)
