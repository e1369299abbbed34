# ========================
# src/etl/ingestion.py
# ========================

"""
Data Ingestion Module

Reads a raw row-set from a local CSV file or an HTTP(S) URL. Content is
split on newlines and then on commas, with no quoting rules, so a file
ending in a newline yields an empty trailing row.
"""

import logging
from typing import List

import requests

logger = logging.getLogger(__name__)

RawRows = List[List[str]]


def split_csv_text(text: str) -> RawRows:
    """Split raw CSV content into rows of string fields."""
    return [line.split(',') for line in text.split('\n')]


def is_url(source: str) -> bool:
    return source.startswith(('http://', 'https://'))


class RawRowReader:
    """
    Reads the whole content of a source into memory and splits it into rows.
    """

    def __init__(self, source: str, timeout: float = 30):
        """
        Initialize the reader.

        Args:
            source (str): Local file path or http(s) URL
            timeout (float): Timeout in seconds for HTTP requests
        """
        self.source = source
        self.timeout = timeout
        logger.info(f"Initialized RawRowReader for source: {source}")

    def read(self) -> RawRows:
        """
        Read and split the source.

        Returns:
            list[list[str]]: Raw rows, including header and trailing row
        """
        text = self._fetch_text() if is_url(self.source) else self._read_text()
        rows = split_csv_text(text)
        logger.info(f"Read {len(rows)} raw rows from {self.source}")
        return rows

    def _read_text(self) -> str:
        try:
            with open(self.source, 'r', newline='', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError:
            logger.error(f"File '{self.source}' was not found")
            raise
        except OSError as e:
            logger.error(f"Error reading CSV file: {e}")
            raise

    def _fetch_text(self) -> str:
        try:
            response = requests.get(self.source, timeout=self.timeout)
            response.raise_for_status()
            return response.text
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching CSV from {self.source}: {e}")
            raise


def read_rows_from_file(file_path: str) -> RawRows:
    return RawRowReader(file_path).read()


def read_rows_from_url(url: str, timeout: float = 30) -> RawRows:
    return RawRowReader(url, timeout=timeout).read()


def read_rows(source: str, timeout: float = 30) -> RawRows:
    """Read a raw row-set from a file path or URL."""
    return RawRowReader(source, timeout=timeout).read()
