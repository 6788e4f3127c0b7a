from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping

import duckdb
import pandas as pd

from benchlab.errors import InvalidDocumentError, RunNotFoundError
from benchlab.storage.models import BenchmarkRun, EndpointRun, HardwareInfo

logger = logging.getLogger(__name__)


def _new_run_id() -> str:
    return uuid.uuid4().hex


def _utc_timestamp() -> str:
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


@dataclass(slots=True)
class ResultStore:
    """Completed benchmark runs kept in a local DuckDB file.

    Each run is stored as its serialized document, so an exported run is
    exactly what was saved or imported. Listing is newest first by insertion
    order. One writer at a time is assumed.
    """

    db_path: Path

    def __post_init__(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> duckdb.DuckDBPyConnection:
        return duckdb.connect(str(self.db_path))

    def _init_schema(self) -> None:
        with self._connect() as con:
            con.execute("CREATE SEQUENCE IF NOT EXISTS benchmark_run_seq START 1")
            con.execute(
                """
                CREATE TABLE IF NOT EXISTS benchmark_runs (
                    id TEXT PRIMARY KEY,
                    seq BIGINT,
                    created_at TEXT,
                    name TEXT,
                    document TEXT
                );
                """
            )

    def run_exists(self, run_id: str) -> bool:
        with self._connect() as con:
            result = con.execute(
                "SELECT COUNT(*) FROM benchmark_runs WHERE id = ?",
                [run_id],
            ).fetchone()
            return bool(result and result[0] > 0)

    def list_runs(self) -> list[BenchmarkRun]:
        with self._connect() as con:
            rows = con.execute(
                "SELECT document FROM benchmark_runs ORDER BY seq DESC"
            ).fetchall()
        return [BenchmarkRun.from_dict(json.loads(row[0])) for row in rows]

    def get_run(self, run_id: str) -> BenchmarkRun | None:
        document = self._load_document(run_id)
        if document is None:
            return None
        return BenchmarkRun.from_dict(document)

    def save_run(
        self,
        name: str,
        hardware: HardwareInfo,
        runs: Iterable[EndpointRun],
    ) -> BenchmarkRun:
        run = BenchmarkRun(
            id=_new_run_id(),
            created_at=_utc_timestamp(),
            name=name,
            hardware=hardware,
            runs=tuple(runs),
        )
        self._insert(run.to_dict())
        logger.info("Saved benchmark run %s (%s, %d variants)", run.id, name, len(run.runs))
        return run

    def delete_run(self, run_id: str) -> bool:
        if not self.run_exists(run_id):
            return False
        with self._connect() as con:
            con.execute("DELETE FROM benchmark_runs WHERE id = ?", [run_id])
        logger.info("Deleted benchmark run %s", run_id)
        return True

    def export_run(self, run_id: str) -> str:
        document = self._load_document(run_id)
        if document is None:
            msg = f"Benchmark run {run_id} not found"
            raise RunNotFoundError(msg)
        return json.dumps(document, indent=2)

    def import_run(self, document: str | Mapping[str, Any]) -> BenchmarkRun:
        """Store an exported run under a freshly minted id.

        Any id carried by the document is discarded so that importing the
        same file twice, or into the store it came from, never collides.
        """
        if isinstance(document, str):
            try:
                data = json.loads(document)
            except json.JSONDecodeError as exc:
                msg = f"Invalid benchmark document: {exc}"
                raise InvalidDocumentError(msg) from exc
        else:
            data = dict(document)
        if not isinstance(data, dict):
            msg = "Invalid benchmark document: expected a JSON object"
            raise InvalidDocumentError(msg)
        stored = {"id": _new_run_id(), **{k: v for k, v in data.items() if k != "id"}}
        try:
            run = BenchmarkRun.from_dict(stored)
        except (KeyError, TypeError, ValueError) as exc:
            msg = f"Invalid benchmark document: missing or malformed {exc}"
            raise InvalidDocumentError(msg) from exc
        self._insert(stored)
        logger.info("Imported benchmark run %s as %s", data.get("id"), run.id)
        return run

    def clear(self) -> None:
        with self._connect() as con:
            con.execute("DELETE FROM benchmark_runs")

    def runs_frame(self) -> pd.DataFrame:
        """One row per variant per stored run, newest run first."""
        rows = [
            {
                "run_id": run.id,
                "name": run.name,
                "created_at": run.created_at,
                "scenario": endpoint_run.scenario,
                "variant": endpoint_run.variant,
                "total_requests": endpoint_run.results.total_requests,
                "requests_per_second": endpoint_run.results.requests_per_second,
                "latency_p50": endpoint_run.results.latency_p50,
                "latency_p95": endpoint_run.results.latency_p95,
                "latency_p99": endpoint_run.results.latency_p99,
                "errors": endpoint_run.results.errors,
            }
            for run in self.list_runs()
            for endpoint_run in run.runs
        ]
        return pd.DataFrame(rows)

    def _insert(self, document: Mapping[str, Any]) -> None:
        with self._connect() as con:
            con.execute(
                """
                INSERT INTO benchmark_runs
                VALUES (?, nextval('benchmark_run_seq'), ?, ?, ?)
                """,
                [
                    document["id"],
                    document["createdAt"],
                    document["name"],
                    json.dumps(document),
                ],
            )

    def _load_document(self, run_id: str) -> dict[str, Any] | None:
        with self._connect() as con:
            row = con.execute(
                "SELECT document FROM benchmark_runs WHERE id = ?",
                [run_id],
            ).fetchone()
        if not row:
            return None
        return json.loads(row[0])
