"""Output models and templates of the state-management plugin."""

from typing import List, Optional

from pydantic import BaseModel, Field


class NamespaceInfo(BaseModel):
    name: str
    entry_count: int = Field(..., description="Number of entries in the namespace")
    size: int = Field(..., description="Serialized size of the entries in bytes")
    last_modified: Optional[str] = Field(default=None, description="ISO timestamp of the last write")


class ListStateOutput(BaseModel):
    namespaces: List[NamespaceInfo]
    total_namespaces: int
    total_entries: int
    total_size: int
    filtered_namespace: Optional[str] = None


class ClearStateOutput(BaseModel):
    cleared: bool
    namespace: Optional[str] = None
    entries_cleared: int
    total_namespaces: Optional[int] = None
    message: str


class StateInfoOutput(BaseModel):
    storage_directory: str
    is_initialized: bool
    total_entries: int
    total_size: int
    namespaces: List[NamespaceInfo]


class StateBackupOutput(BaseModel):
    success: bool
    file_path: str
    timestamp: str
    total_namespaces: int
    total_size: int
    namespaces: List[str]


class StateStatsOutput(BaseModel):
    total_namespaces: int
    total_entries: int
    total_size: int
    namespaces: List[NamespaceInfo]


LIST_STATE_TEMPLATE = """
{% if total_namespaces == 0 %}
No state data found
{% else %}
{% if filtered_namespace %}
State data for namespace: {{ filtered_namespace }}
{% else %}
State data across all namespaces
{% endif %}

{% for ns in namespaces %}
{{ loop.index }}. {{ ns.name }}
   Entries: {{ ns.entry_count }}
   Size: {{ ns.size }} bytes
   Last Modified: {{ ns.last_modified }}

{% endfor %}
Total: {{ total_entries }} entries, {{ total_size }} bytes across {{ total_namespaces }} namespace(s)
{% endif %}
""".strip()

CLEAR_STATE_TEMPLATE = """
{{ message }}
""".strip()

STATE_INFO_TEMPLATE = """
State Information:

   Storage Directory: {{ storage_directory }}
   Initialized: {{ "yes" if is_initialized else "no" }}
   Total Entries: {{ total_entries }}
   Total Size: {{ total_size }} bytes

{% for ns in namespaces %}
   {{ ns.name }}: {{ ns.entry_count }} entries, {{ ns.size }} bytes
{% else %}
   No namespaces registered
{% endfor %}
""".strip()

STATE_BACKUP_TEMPLATE = """
Backup created: {{ file_path }}
   Timestamp: {{ timestamp }}
   Namespaces: {{ total_namespaces }}{% if namespaces %} ({{ namespaces | join(", ") }}){% endif %}

   Total Size: {{ total_size }} bytes
""".strip()

STATE_STATS_TEMPLATE = """
State Statistics:

   Total Namespaces: {{ total_namespaces }}
   Total Entries: {{ total_entries }}
   Total Size: {{ total_size }} bytes

{% if namespaces %}
   Namespace Details:
{% for ns in namespaces %}
   {{ ns.name }}:
     Entries: {{ ns.entry_count }}
     Size: {{ ns.size }} bytes
     Last Modified: {{ ns.last_modified }}

{% endfor %}
{% else %}
   No namespaces found
{% endif %}
""".strip()
