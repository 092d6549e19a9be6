from .retry import run_with_retries
from .utils import build_sync_service, finish_flow_metrics
