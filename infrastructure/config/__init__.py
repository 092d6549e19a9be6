from .settings import Settings, settings
from .sync_config_loader import load_sync_config
