from .fetch_service import PAGE_SIZE, PROGRESS_EVERY, PaginatedFetcher
from .field_catalog_service import FieldCatalog, FieldCatalogService
from .filter_service import FilterService, format_filter_type, normalize_filter_type
from .option_mapping import OptionLabelMapper, OptionMapping
from .path_resolver import FieldPathResolver
from .schema_discovery import MAX_DISCOVERY_DEPTH, SchemaDiscoverer
from .sync_service import SyncResult, SyncService
from .table_projector import ProjectedTable, TableProjector
from .value_formatter import ValueFormatter
