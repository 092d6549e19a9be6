from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Sequence

import structlog
from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from infrastructure.observability.metrics import rows_written_counter

log = structlog.get_logger(__name__)

LAST_SYNCED_LABEL = "Last synced:"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_SHEET_TITLE = 31
MAX_COLUMN_WIDTH = 80
_INVALID_TITLE_CHARS = re.compile(r"[\[\]:*?/\\]")


def sheet_title(table_name: str) -> str:
    title = _INVALID_TITLE_CHARS.sub("_", table_name or "").strip()
    return (title or "Sheet")[:MAX_SHEET_TITLE]


def clean_cell_text(value):
    """Remove caracteres de controle que o formato .xlsx não aceita (ex.: \\x0b)."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def _put(ws, row: int, column: int, value):
    cell = ws.cell(row=row, column=column, value=clean_cell_text(value))
    # texto vindo do CRM nunca é fórmula ("=== Big deal ===")
    if cell.data_type == "f":
        cell.data_type = "s"
    return cell


class ExcelWorkbookSink:
    """
    Uma aba por tabela num workbook .xlsx.

    Aba criada se não existir, senão esvaziada; cabeçalho em negrito na linha 1;
    dados a partir da linha 2; larguras pelo maior conteúdo; "Last synced:"
    uma linha em branco abaixo dos dados.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.log = log.bind(sink="excel", path=str(self.path))

    def write(
        self,
        table_name: str,
        header_row: Sequence[str],
        data_rows: Sequence[Sequence[str]],
        synced_at: datetime,
    ) -> None:
        title = sheet_title(table_name)
        workbook, created = self._open()

        if title in workbook.sheetnames:
            ws = workbook[title]
            ws.delete_rows(1, ws.max_row)
            for letter in list(ws.column_dimensions.keys()):
                del ws.column_dimensions[letter]
        elif created and workbook.sheetnames == ["Sheet"]:
            # workbook novo: reaproveita a aba padrão
            ws = workbook.active
            ws.title = title
        else:
            ws = workbook.create_sheet(title)

        bold = Font(bold=True)
        for col_idx, value in enumerate(header_row, start=1):
            cell = _put(ws, 1, col_idx, value)
            cell.font = bold

        for row_idx, row in enumerate(data_rows, start=2):
            for col_idx, value in enumerate(row, start=1):
                _put(ws, row_idx, col_idx, value)

        last_row = 1 + len(data_rows)
        stamp_row = last_row + 2
        _put(ws, stamp_row, 1, LAST_SYNCED_LABEL)
        _put(ws, stamp_row, 2, synced_at.strftime(TIMESTAMP_FORMAT))

        self._autosize(ws, header_row, data_rows)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(self.path)

        rows_written_counter.labels(sink="excel").inc(len(data_rows))
        self.log.info("Sheet written", sheet=title, rows=len(data_rows), columns=len(header_row))

    def _open(self) -> tuple[Workbook, bool]:
        if self.path.exists():
            return load_workbook(self.path), False
        return Workbook(), True

    @staticmethod
    def _autosize(ws, header_row: Sequence[str], data_rows: Sequence[Sequence[str]]) -> None:
        widths: dict[int, int] = {}
        for row in [header_row, *data_rows]:
            for col_idx, value in enumerate(row, start=1):
                length = max((len(line) for line in str(value or "").splitlines()), default=0)
                widths[col_idx] = max(widths.get(col_idx, 0), length)
        for col_idx, width in widths.items():
            ws.column_dimensions[get_column_letter(col_idx)].width = min(width + 2, MAX_COLUMN_WIDTH)
