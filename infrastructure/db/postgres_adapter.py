from contextlib import contextmanager
from psycopg2.pool import SimpleConnectionPool

from core.exceptions import ConfigurationError
from infrastructure.config.settings import settings

class PostgresPool:
    def __init__(
        self,
        dsn: str | None = None,
        minconn: int = 1,
        maxconn: int = 4
    ):
        """
        dsn: se não informado, usa settings.DATABASE_URL
        minconn/maxconn: tamanho mínimo/máximo do pool (o sync é sequencial)
        """
        raw = dsn or settings.DATABASE_URL
        if not raw:
            raise ConfigurationError("DATABASE_URL is not set; cannot use the postgres sink.", phase="config")
        if raw.startswith("postgresql+psycopg2://"):
            raw = raw.replace("postgresql+psycopg2://", "postgresql://", 1)
        self._dsn = raw
        self._pool = SimpleConnectionPool(minconn, maxconn, dsn=self._dsn)

    @contextmanager
    def connection(self):
        """
        Empresta uma conexão; commit fica a cargo de quem usa, rollback
        automático se o bloco levantar.
            with pool.connection() as conn, conn.cursor() as cur:
                ...
                conn.commit()
        """
        conn = self._pool.getconn()
        try:
            yield conn
        except Exception:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)

    def close(self):
        """Fecha todas as conexões do pool."""
        self._pool.closeall()

_pool: PostgresPool | None = None

def get_postgres_conn() -> PostgresPool:
    """Pool único por processo, criado na primeira chamada."""
    global _pool
    if _pool is None:
        _pool = PostgresPool()
    return _pool
