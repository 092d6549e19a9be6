from . import metrics
from .logging import configure_logging
from .metrics import (
    api_errors_counter,
    api_request_duration_hist,
    etl_counter,
    etl_duration_hist,
    etl_failure_counter,
    etl_last_successful_run_timestamp,
    pages_fetched_counter,
    pipedrive_api_breaker_open_total,
    pipedrive_api_call_total,
    pipedrive_api_malformed_response_total,
    projection_duration_hist,
    push_metrics_to_gateway,
    records_fetched_counter,
    rows_written_counter,
)
