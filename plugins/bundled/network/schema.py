"""Output models and templates of the network plugin."""

from typing import List, Optional

from pydantic import BaseModel

NETWORK_NAMESPACE = "network-state"


class NetworkSummary(BaseModel):
    name: str
    is_active: bool
    is_testnet: bool
    rpc_url: str
    mirror_node_url: str
    operator_id: Optional[str] = None


class ListNetworksOutput(BaseModel):
    networks: List[NetworkSummary]
    active_network: str


class UseNetworkOutput(BaseModel):
    active_network: str
    previous_network: Optional[str] = None


NETWORK_STATE_SCHEMA = {
    "type": "object",
    "properties": {
        "network": {"type": "string"},
        "previous_network": {"type": ["string", "null"]},
        "switched_at": {"type": "string"},
    },
    "required": ["network", "switched_at"],
}

LIST_NETWORKS_TEMPLATE = """
Available networks:
{% for network in networks %}
   {{ "*" if network.is_active else " " }} {{ network.name }}{% if not network.is_testnet %} (production){% endif %}

       RPC: {{ network.rpc_url }}
       Mirror node: {{ network.mirror_node_url }}
       Operator: {{ network.operator_id or "not configured" }}
{% endfor %}

Active network: {{ active_network }}
""".strip()

USE_NETWORK_TEMPLATE = """
Switched to network: {{ active_network }}{% if previous_network %} (was {{ previous_network }}){% endif %}
""".strip()
