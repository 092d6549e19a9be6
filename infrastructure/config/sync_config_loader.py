import json
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from pydantic import ValidationError

from core.exceptions import ConfigurationError
from core.schemas.sync_config import SyncConfig
from infrastructure.config.settings import settings

log = structlog.get_logger(__name__)


def load_sync_config(
    path: Optional[str | Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> SyncConfig:
    """
    Lê a configuração de sync (JSON) e valida com pydantic.

    Formato:
        {
          "entity_kind": "deals",
          "filter_id": 42,
          "table_name": "Deals",
          "columns": [{"path": "title", "displayName": "Title"}, ...]
        }
    `overrides` substitui chaves de topo (ex.: filter_id vindo do flow).
    """
    cfg_path = Path(path or settings.SYNC_CONFIG_PATH)
    try:
        raw = json.loads(cfg_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigurationError(f"Sync config file not found: {cfg_path}", phase="config") from None
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Sync config is not valid JSON: {exc}", phase="config") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError("Sync config must be a JSON object", phase="config")

    raw |= {k: v for k, v in (overrides or {}).items() if v is not None}

    try:
        config = SyncConfig.model_validate(raw)
    except (ValidationError, ValueError) as exc:
        raise ConfigurationError(
            f"Invalid sync config: {exc}",
            entity_kind=str(raw.get("entity_kind")),
            phase="config",
        ) from exc

    log.info(
        "Sync config loaded",
        path=str(cfg_path),
        entity_kind=config.entity_kind.value,
        filter_id=config.filter_id,
        columns=len(config.columns),
    )
    return config
