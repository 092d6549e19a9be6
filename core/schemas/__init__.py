from .entity_kind import EntityKind
from .field_schema import FieldDescriptor, FieldOption, LeadLabel
from .column_schema import ColumnSpec, DiscoveredColumn
from .filter_schema import Filter
from .sync_config import SyncConfig
