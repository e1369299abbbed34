# ========================
# api_server.py
# ========================

"""
FastAPI Server for the Order ETL Pipeline

Provides REST endpoints to trigger pipeline runs with optional status/origin
filters and to fetch their results.
"""

import logging
import threading
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import FileResponse
import uvicorn

from src.etl import DecodeError, ETLPipeline, FilterMode, UsageError, parse_filter_args
from src.etl.filtering import USAGE
from src.utils.config import Config
from src.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)

RUN_NOT_FOUND_MSG = "Run not found"
RUN_NOT_COMPLETED_MSG = "Run did not complete"

MEDIA_TYPES = {
    'csv': 'text/csv',
    'sqlite': 'application/vnd.sqlite3',
    'summary': 'application/json',
}


class RunRegistry:
    """
    In-memory record of the runs served by this process.

    Holds at most max_runs entries; the oldest run is forgotten first.
    Output directories of forgotten runs stay on disk.
    """

    def __init__(self, max_runs: int = 100):
        self.max_runs = max_runs
        self._runs: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def put(self, run: Dict[str, Any]) -> None:
        with self._lock:
            self._runs[run['run_id']] = run
            while len(self._runs) > self.max_runs:
                oldest = next(iter(self._runs))
                del self._runs[oldest]
                logger.info(f"Forgot run {oldest} (registry holds {self.max_runs})")

    def get(self, run_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._runs.get(run_id)

    def list(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._runs.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._runs)


def resolve_filters(status: Optional[str], origin: Optional[str]):
    """
    Derive (status, origin, mode) from query parameters.

    Uses the same rules as the command line, and additionally rejects a
    status parameter carrying an origin token (and vice versa).
    """
    args = [value for value in (status, origin) if value is not None]
    resolved_status, resolved_origin, mode = parse_filter_args(args)

    if status is not None and origin is not None:
        expected = FilterMode.STATUS_AND_ORIGIN
    elif status is not None:
        expected = FilterMode.STATUS_ONLY
    elif origin is not None:
        expected = FilterMode.ORIGIN_ONLY
    else:
        expected = FilterMode.NONE

    if mode != expected:
        raise UsageError(
            f"Invalid filter parameters: status={status!r}, origin={origin!r}\n{USAGE}"
        )
    return resolved_status, resolved_origin, mode


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Build the API application around a configuration."""
    config = config or Config()
    registry = RunRegistry(max_runs=config.API_MAX_RUNS)

    app = FastAPI(
        title="Order ETL Pipeline API",
        description="Run the order ETL pipeline and fetch its results",
        version="1.0.0"
    )
    app.state.config = config
    app.state.runs = registry

    @app.get("/")
    def root():
        """Root endpoint with API information."""
        return {
            "message": "Order ETL Pipeline API",
            "version": "1.0.0",
            "endpoints": {
                "run": "POST /runs?status=&origin= - Run the pipeline",
                "runs": "GET /runs - List runs",
                "run_detail": "GET /runs/{run_id} - Run results",
                "download": "GET /runs/{run_id}/download?file_type=csv|sqlite|summary",
                "health": "GET /health - Health check",
                "api_docs": "/docs - API documentation"
            }
        }

    @app.get("/health")
    def health_check():
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "runs": len(registry)
        }

    @app.post("/runs")
    def create_run(
        status: Optional[str] = Query(None, description="Pending, Complete or Cancelled"),
        origin: Optional[str] = Query(None, description="O (online) or P (phone)")
    ):
        """
        Run the pipeline synchronously and return its aggregated orders.
        """
        try:
            resolved_status, resolved_origin, mode = resolve_filters(status, origin)
        except UsageError as e:
            raise HTTPException(status_code=400, detail=str(e))

        run_id = str(uuid.uuid4())
        run = {
            'run_id': run_id,
            'status': 'processing',
            'created_at': datetime.now().isoformat(),
            'filter': {'status': status, 'origin': origin, 'mode': int(mode)},
        }
        registry.put(run)

        output_dir = Path(config.DEFAULT_OUTPUT_DIR) / run_id
        try:
            pipeline = ETLPipeline(
                orders_source=config.ORDERS_SOURCE,
                order_items_source=config.ORDER_ITEMS_SOURCE,
                output_dir=str(output_dir),
                status=resolved_status,
                origin=resolved_origin,
                mode=mode,
                config=config
            )
            results = pipeline.run()
        except DecodeError as e:
            logger.error(f"Run {run_id} failed to decode input: {e}")
            registry.put({**run, 'status': 'failed', 'error': str(e)})
            raise HTTPException(status_code=422, detail=str(e))
        except Exception as e:
            logger.error(f"Run {run_id} failed: {e}", exc_info=True)
            registry.put({**run, 'status': 'failed', 'error': str(e)})
            raise HTTPException(status_code=500, detail=f"Pipeline run failed: {e}")

        run = {
            **run,
            'status': 'completed',
            'completed_at': datetime.now().isoformat(),
            'counts': results['counts'],
            'aggregated_orders': results['aggregated_orders'],
            'saved_files': results['saved_files'],
        }
        registry.put(run)
        logger.info(f"Run {run_id} completed with {len(results['aggregated_orders'])} orders")
        return run

    @app.get("/runs")
    def list_runs():
        return {
            "runs": [
                {key: run.get(key) for key in ('run_id', 'status', 'created_at', 'filter')}
                for run in registry.list()
            ]
        }

    @app.get("/runs/{run_id}")
    def get_run(run_id: str):
        run = registry.get(run_id)
        if run is None:
            raise HTTPException(status_code=404, detail=RUN_NOT_FOUND_MSG)
        return run

    @app.get("/runs/{run_id}/download")
    def download_results(
        run_id: str,
        file_type: str = Query(..., description="csv, sqlite or summary")
    ):
        run = registry.get(run_id)
        if run is None:
            raise HTTPException(status_code=404, detail=RUN_NOT_FOUND_MSG)
        if run['status'] != 'completed':
            raise HTTPException(status_code=400, detail=RUN_NOT_COMPLETED_MSG)

        file_path = run['saved_files'].get(file_type)
        if file_path is None or not Path(file_path).exists():
            raise HTTPException(status_code=404, detail=f"No {file_type!r} output for run {run_id}")

        return FileResponse(
            file_path,
            media_type=MEDIA_TYPES[file_type],
            filename=Path(file_path).name
        )

    return app


def start_server(host: str = "0.0.0.0", port: Optional[int] = None):
    """Start the API server."""
    config = Config()
    setup_logging(log_level=config.LOG_LEVEL, log_file=config.LOG_FILE, log_dir=config.LOG_DIR)
    port = port or config.API_PORT
    logger.info(f"Starting Order ETL API server on {host}:{port}")
    uvicorn.run(create_app(config), host=host, port=port, log_level="info")


if __name__ == "__main__":
    start_server()
