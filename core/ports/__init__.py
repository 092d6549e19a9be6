from .pipedrive_client_port import PipedriveClientPort
from .table_sink_port import TableSinkPort
from .status_reporter_port import StatusReporterPort
