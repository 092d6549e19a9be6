from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import pandas as pd
import structlog

from core.schemas.column_schema import ColumnSpec
from core.services.path_resolver import FieldPathResolver
from core.services.value_formatter import ValueFormatter
from infrastructure.observability.metrics import projection_duration_hist

log = structlog.get_logger(__name__)


@dataclass
class ProjectedTable:
    header_row: List[str] = field(default_factory=list)
    data_rows: List[List[str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.data_rows


class TableProjector:
    """Registros + ColumnSpec → cabeçalho + linhas (ordem preservada, sem dedup)."""

    def __init__(
        self,
        resolver: FieldPathResolver | None = None,
        formatter: type[ValueFormatter] | ValueFormatter | None = None,
    ):
        self.resolver = resolver or FieldPathResolver()
        self.formatter = formatter or ValueFormatter

    def project(
        self,
        records: Iterable[Mapping[str, Any]],
        column_spec: Sequence[ColumnSpec | Mapping[str, Any]],
        option_mapping: Optional[Mapping[str, Mapping[str, str]]] = None,
        entity: str = "unknown",
    ) -> ProjectedTable:
        start = time.monotonic()
        columns = [_as_column(c) for c in column_spec]
        option_mapping = option_mapping or {}

        header = [c.display_name for c in columns]
        rows = [
            [
                self.formatter.format(self.resolver.resolve(record, c.path), c.path, option_mapping)
                for c in columns
            ]
            for record in records
        ]

        projection_duration_hist.labels(entity=entity).observe(time.monotonic() - start)
        log.debug("Records projected", entity=entity, rows=len(rows), columns=len(header))
        return ProjectedTable(header_row=header, data_rows=rows)

    @staticmethod
    def to_dataframe(table: ProjectedTable) -> pd.DataFrame:
        """Visão pandas da tabela (todas as colunas como string)."""
        df = pd.DataFrame(table.data_rows, columns=table.header_row)
        return df.astype("string")


def _as_column(raw: ColumnSpec | Mapping[str, Any]) -> ColumnSpec:
    if isinstance(raw, ColumnSpec):
        return raw
    return ColumnSpec.model_validate(raw)
