"""Output models and templates of the plugin-management plugin."""

from typing import List, Optional

from pydantic import BaseModel, Field


class PluginSummary(BaseModel):
    name: str
    display_name: str
    version: str
    status: str
    path: str


class PluginDetails(PluginSummary):
    description: str = ""
    error: Optional[str] = None
    commands: List[str] = Field(default_factory=list)
    capabilities: List[str] = Field(default_factory=list)
    namespaces: List[str] = Field(default_factory=list)


class AddPluginOutput(BaseModel):
    name: str
    path: str
    added: bool
    message: str


class RemovePluginOutput(BaseModel):
    name: str
    removed: bool
    message: str


class ListPluginsOutput(BaseModel):
    plugins: List[PluginSummary]
    count: int


class PluginInfoOutput(BaseModel):
    found: bool
    plugin: Optional[PluginDetails] = None
    message: str


ADD_PLUGIN_TEMPLATE = """
{{ message }}
   Path: {{ path }}
""".strip()

REMOVE_PLUGIN_TEMPLATE = "{{ message }}"

LIST_PLUGINS_TEMPLATE = """
{% if count == 0 %}
No plugins loaded
{% else %}
Loaded plugins ({{ count }}):
{% for plugin in plugins %}
   {{ loop.index }}. {{ plugin.display_name }} ({{ plugin.name }}) v{{ plugin.version }} [{{ plugin.status }}]
{% endfor %}
{% endif %}
""".strip()

PLUGIN_INFO_TEMPLATE = """
{% if not found %}
{{ message }}
{% else %}
{{ plugin.display_name }} ({{ plugin.name }}) v{{ plugin.version }}
   Status: {{ plugin.status }}{% if plugin.error %} - {{ plugin.error }}{% endif %}

   Path: {{ plugin.path }}
{% if plugin.description %}
   Description: {{ plugin.description }}
{% endif %}
   Commands: {{ plugin.commands | join(", ") or "none" }}
   Capabilities: {{ plugin.capabilities | join(", ") or "none" }}
{% if plugin.namespaces %}
   State namespaces: {{ plugin.namespaces | join(", ") }}
{% endif %}
{% endif %}
""".strip()
