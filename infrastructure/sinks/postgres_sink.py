# -*- coding: utf-8 -*-
"""
Infra • Destino Postgres (replace-on-sync).

• DROP + CREATE TABLE na mesma transação: colunas TEXT (nomes normalizados do
  cabeçalho) sempre na ordem e no conjunto da lista de colunas atual
• cabeçalho original fica como COMMENT de cada coluna
• carga com execute_values
• "Last synced" vai para a tabela `sync_meta`
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Sequence

import pandas as pd
import structlog
from psycopg2 import sql
from psycopg2.extras import execute_values

from core.services.table_projector import ProjectedTable, TableProjector
from core.utils.column_utils import normalize_column_name, unique_column_names
from infrastructure.db.postgres_adapter import PostgresPool, get_postgres_conn
from infrastructure.observability.metrics import rows_written_counter

_LOG = structlog.get_logger(__name__)

SYNC_META_TABLE = "sync_meta"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
INSERT_PAGE_SIZE = 250


class PostgresTableSink:

    def __init__(self, pool: PostgresPool | None = None):
        self.pool = pool
        self.log = _LOG.bind(sink="postgres")

    def write(
        self,
        table_name: str,
        header_row: Sequence[str],
        data_rows: Sequence[Sequence[str]],
        synced_at: datetime,
    ) -> None:
        table = normalize_column_name(table_name)
        columns = unique_column_names(header_row)
        df = TableProjector.to_dataframe(
            ProjectedTable(header_row=columns, data_rows=[list(r) for r in data_rows])
        )
        pool = self.pool or get_postgres_conn()

        with pool.connection() as conn, conn.cursor() as cur:
            self._recreate_table(cur, table, columns)
            self._comment_columns(cur, table, columns, header_row)

            if columns and not df.empty:
                rows = [
                    tuple(None if pd.isna(v) else str(v) for v in rec)
                    for rec in df.itertuples(index=False, name=None)
                ]
                stmt = sql.SQL("INSERT INTO {t} ({cols}) VALUES %s").format(
                    t=sql.Identifier(table),
                    cols=sql.SQL(", ").join(map(sql.Identifier, columns)),
                )
                execute_values(cur, stmt, rows, page_size=INSERT_PAGE_SIZE)

            self._stamp(cur, table, synced_at, len(data_rows))
            conn.commit()

        rows_written_counter.labels(sink="postgres").inc(len(data_rows))
        self.log.info("Table written", table=table, rows=len(data_rows), columns=len(columns))

    # ───────────────────── DDL
    @staticmethod
    def _recreate_table(cur, table: str, columns: List[str]) -> None:
        # colunas reordenadas ou removidas não podem sobrar da execução anterior
        cols_def = sql.SQL(", ").join(
            sql.SQL("{} TEXT").format(sql.Identifier(c)) for c in columns
        )
        cur.execute(sql.SQL("DROP TABLE IF EXISTS {}").format(sql.Identifier(table)))
        cur.execute(
            sql.SQL("CREATE TABLE {t} ({cols})").format(
                t=sql.Identifier(table), cols=cols_def
            )
        )

    @staticmethod
    def _comment_columns(cur, table: str, columns: List[str], header_row: Sequence[str]) -> None:
        for col, display in zip(columns, header_row):
            cur.execute(
                sql.SQL("COMMENT ON COLUMN {}.{} IS %s").format(
                    sql.Identifier(table), sql.Identifier(col)
                ),
                (display,),
            )

    @staticmethod
    def _stamp(cur, table: str, synced_at: datetime, row_count: int) -> None:
        cur.execute(
            sql.SQL(
                "CREATE TABLE IF NOT EXISTS {} ("
                "table_name TEXT PRIMARY KEY, last_synced TEXT NOT NULL, row_count INTEGER NOT NULL)"
            ).format(sql.Identifier(SYNC_META_TABLE))
        )
        cur.execute(
            sql.SQL(
                "INSERT INTO {} (table_name, last_synced, row_count) VALUES (%s, %s, %s) "
                "ON CONFLICT (table_name) DO UPDATE SET "
                "last_synced = EXCLUDED.last_synced, row_count = EXCLUDED.row_count"
            ).format(sql.Identifier(SYNC_META_TABLE)),
            (table, synced_at.strftime(TIMESTAMP_FORMAT), row_count),
        )
