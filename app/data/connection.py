from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, Optional, Union

import pandas as pd
from databricks import sql

from config import AppConfig


logger = logging.getLogger(__name__)

LOCAL_TABLES = ("device_data", "impact_data")


class DatabricksAuthError(RuntimeError):
    pass


class LocalDataError(RuntimeError):
    pass


def _is_databricks_apps(cfg: AppConfig) -> bool:
    """Check if running in Databricks Apps environment."""
    return bool(cfg.databricks_app_name)


@dataclass(frozen=True)
class SqlClient:
    cfg: AppConfig
    source: ClassVar[str] = "databricks_sql"

    def query(self, query: str, params: Optional[dict[str, Any]] = None) -> pd.DataFrame:
        """
        Returns a pandas.DataFrame from Databricks SQL.
        Supports both PAT auth (local dev) and Databricks Apps OAuth.
        """
        server_hostname = self.cfg.databricks_host.replace("https://", "").replace("http://", "")
        http_path = self.cfg.databricks_http_path

        # Try Databricks Apps OAuth first
        if _is_databricks_apps(self.cfg):
            try:
                return self._query_statement_api(query, http_path)
            except ImportError:
                pass  # Fall through to PAT auth
            except Exception as e:
                logger.warning("Databricks Apps OAuth failed, trying PAT: %s", e)

        # Fall back to PAT authentication (local dev)
        if not self.cfg.databricks_token:
            raise DatabricksAuthError(
                "Missing DATABRICKS_TOKEN for Databricks SQL authentication. "
                "Set DATABRICKS_TOKEN (PAT) for local dev, or run in Databricks Apps for automatic auth."
            )

        with sql.connect(
            server_hostname=server_hostname,
            http_path=http_path,
            access_token=self.cfg.databricks_token,
        ) as conn:
            with conn.cursor() as cur:
                cur.execute(query, params or {})
                rows = cur.fetchall()
                cols = [d[0] for d in (cur.description or [])]
                return pd.DataFrame(rows, columns=cols)

    def _query_statement_api(self, query: str, http_path: str) -> pd.DataFrame:
        from databricks.sdk import WorkspaceClient
        from databricks.sdk.service.sql import StatementState

        # SDK client picks up Apps OAuth automatically
        w = WorkspaceClient()
        warehouse_id = http_path.split("/")[-1] if "/" in http_path else http_path

        response = w.statement_execution.execute_statement(
            warehouse_id=warehouse_id,
            statement=query,
            wait_timeout="30s",
        )

        if response.status and response.status.state == StatementState.SUCCEEDED:
            cols = [c.name for c in response.manifest.schema.columns] if response.manifest else []
            if response.result and response.result.data_array:
                return pd.DataFrame(response.result.data_array, columns=cols)
            return pd.DataFrame(columns=cols)

        error_msg = response.status.error.message if response.status and response.status.error else "Unknown error"
        raise RuntimeError(f"SQL execution failed: {error_msg}")


def _quote_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def _sqlite_value(v: Any) -> Any:
    if v is None or (not isinstance(v, str) and pd.isna(v)):
        return None
    # numpy scalars -> python scalars (sqlite3 cannot bind numpy types)
    if hasattr(v, "item"):
        return v.item()
    return v


def load_table(conn: sqlite3.Connection, schema: str, table: str, df: pd.DataFrame) -> None:
    fq = f"{_quote_ident(schema)}.{_quote_ident(table)}"
    cols = ", ".join(_quote_ident(str(c)) for c in df.columns)
    placeholders = ", ".join("?" for _ in df.columns)
    conn.execute(f"CREATE TABLE {fq} ({cols})")
    rows = [tuple(_sqlite_value(v) for v in row) for row in df.itertuples(index=False, name=None)]
    conn.executemany(f"INSERT INTO {fq} ({cols}) VALUES ({placeholders})", rows)


@dataclass(frozen=True)
class LocalSqlClient:
    """
    Runs the warehouse SQL against a local CSV copy of the dataset.

    `device_data.csv` and `impact_data.csv` are read from `cfg.local_data_dir`
    into an in-memory SQLite database attached under the schema name, so
    `` `intel`.device_data `` resolves exactly as it does on Databricks.
    """

    cfg: AppConfig
    source: ClassVar[str] = "local_csv"

    @property
    def data_dir(self) -> Path:
        if not self.cfg.local_data_dir:
            raise LocalDataError("LOCAL_DATA_DIR is not set")
        return Path(self.cfg.local_data_dir)

    def read_table(self, table: str) -> pd.DataFrame:
        path = self.data_dir / f"{table}.csv"
        if not path.is_file():
            raise LocalDataError(f"Missing {table}.csv in {self.data_dir}")
        try:
            return pd.read_csv(path)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise LocalDataError(f"Could not read {path}: {e}") from e

    def _attach_dataset(self, conn: sqlite3.Connection) -> None:
        schema = self.cfg.databricks_schema
        conn.execute(f"ATTACH DATABASE ':memory:' AS {_quote_ident(schema)}")
        for table in LOCAL_TABLES:
            df = self.read_table(table)
            load_table(conn, schema, table, df)
            logger.debug("Loaded %s rows into %s.%s", len(df), schema, table)

    def query(self, query: str, params: Optional[Union[dict[str, Any], tuple]] = None) -> pd.DataFrame:
        with closing(sqlite3.connect(":memory:")) as conn:
            self._attach_dataset(conn)
            cur = conn.execute(query, params or ())
            rows = cur.fetchall()
            cols = [d[0] for d in (cur.description or [])]
            return pd.DataFrame(rows, columns=cols)


def get_sql_client(cfg: AppConfig) -> Union[SqlClient, LocalSqlClient]:
    if cfg.data_mode == "local_csv":
        return LocalSqlClient(cfg=cfg)
    return SqlClient(cfg=cfg)
