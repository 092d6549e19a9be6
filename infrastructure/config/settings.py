# infrastructure/config/settings.py: env vars (+ .env) lidos uma única vez
from dotenv import load_dotenv
import os

# Load environment variables from .env file if present
load_dotenv()

class Settings:
    """Configurações da aplicação (env vars)."""
    # Pipedrive
    PIPEDRIVE_API_KEY      = os.getenv("PIPEDRIVE_API_KEY")
    PIPEDRIVE_ACCESS_TOKEN = os.getenv("PIPEDRIVE_ACCESS_TOKEN")
    PIPEDRIVE_SUBDOMAIN    = os.getenv("PIPEDRIVE_SUBDOMAIN", "api")
    PIPEDRIVE_TIMEOUT      = int(os.getenv("PIPEDRIVE_TIMEOUT", "45"))

    # Sync
    SYNC_CONFIG_PATH       = os.getenv("SYNC_CONFIG_PATH", "sync_config.json")
    SYNC_SINK              = os.getenv("SYNC_SINK", "excel")          # excel | postgres
    SYNC_WORKBOOK_PATH     = os.getenv("SYNC_WORKBOOK_PATH", "pipedrive_sync.xlsx")
    SYNC_FETCH_RETRIES     = int(os.getenv("SYNC_FETCH_RETRIES", "0"))

    # Postgres
    DATABASE_URL           = os.getenv("DATABASE_URL")

    # Observabilidade
    LOG_LEVEL              = os.getenv("LOG_LEVEL", "INFO")
    PUSHGATEWAY_ADDRESS    = os.getenv("PUSHGATEWAY_ADDRESS")

    # Prefect / Docker
    PREFECT_WORK_POOL_NAME = os.getenv("PREFECT_WORK_POOL_NAME")
    IMAGE_NAME             = os.getenv("IMAGE_NAME")
    DEFAULT_DOCKER_NETWORK_NAME = os.getenv("DEFAULT_DOCKER_NETWORK_NAME")

    @property
    def pipedrive_base_url(self) -> str:
        return f"https://{self.PIPEDRIVE_SUBDOMAIN}.pipedrive.com/api/v1"

settings = Settings()
