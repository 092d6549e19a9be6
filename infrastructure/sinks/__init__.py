from infrastructure.config.settings import settings
from core.exceptions import ConfigurationError

from .excel_sink import ExcelWorkbookSink
from .postgres_sink import PostgresTableSink


def build_sink(kind: str | None = None):
    """Destino configurado em SYNC_SINK (`excel` | `postgres`)."""
    kind = (kind or settings.SYNC_SINK or "excel").strip().lower()
    if kind == "excel":
        return ExcelWorkbookSink(settings.SYNC_WORKBOOK_PATH)
    if kind == "postgres":
        return PostgresTableSink()
    raise ConfigurationError(f"Unknown sink {kind!r}; expected 'excel' or 'postgres'.", phase="config")
