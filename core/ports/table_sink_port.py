from datetime import datetime
from typing import Protocol, Sequence


class TableSinkPort(Protocol):
    """
    Contrato de escrita:
    • cria o destino se não existir, senão limpa
    • cabeçalho na 1ª linha, com destaque
    • linhas de dados contíguas logo abaixo
    • auto-size das colunas
    • linha final "Last synced:" com o timestamp
    """

    def write(
        self,
        table_name: str,
        header_row: Sequence[str],
        data_rows: Sequence[Sequence[str]],
        synced_at: datetime,
    ) -> None:
        ...
