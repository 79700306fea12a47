from datetime import datetime
from typing import Any, Dict, Optional


def record_switch(network: str, previous: Optional[str]) -> Dict[str, Any]:
    return {
        "network": network,
        "previous_network": previous,
        "switched_at": datetime.now().astimezone().isoformat(timespec="seconds"),
    }
