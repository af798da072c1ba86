"""Detailing service catalog with durations, categories, and pricing."""

import logging
import re
from typing import Optional

logger = logging.getLogger(__name__)

SERVICE_CATALOG: dict[str, dict] = {
    "foam-wash": {
        "name": "Foam Wash",
        "description": "Exterior snow-foam pre-wash, contact wash, and hand dry.",
        "duration_minutes": 30,
        "category": "Detailed Wash",
        "price": 499,
    },
    "premium-wash": {
        "name": "Premium Wash",
        "description": "Foam wash plus wheel, arch, and door-jamb cleaning.",
        "duration_minutes": 45,
        "category": "Detailed Wash",
        "price": 799,
    },
    "interior-detail": {
        "name": "Interior Detailing",
        "description": "Vacuum, upholstery shampoo, dashboard and trim dressing.",
        "duration_minutes": 90,
        "category": "Interior",
        "price": 1999,
    },
    "ac-gas-check": {
        "name": "AC Gas Check",
        "description": "Cabin AC pressure check and vent sanitising.",
        "duration_minutes": 20,
        "category": "Interior",
        "price": 299,
    },
    "machine-polish": {
        "name": "Machine Polish",
        "description": "Single-stage paint correction for light swirls.",
        "duration_minutes": 120,
        "category": "Paint Protection",
        "price": 3499,
    },
    "ceramic-coating": {
        "name": "Ceramic Coating",
        "description": "Paint decontamination, polish, and 9H ceramic coating.",
        "duration_minutes": 240,
        "category": "Paint Protection",
        "price": 14999,
    },
    "salt-mark-remover": {
        "name": "Salt Mark Stain Remover",
        "description": "Hard-water and salt-mark removal from glass and paint.",
        "duration_minutes": 40,
        "category": "Detailed Wash",
        "price": 599,
    },
}

SERVICE_ALIASES: dict[str, str] = {
    "wash": "foam-wash", "foam": "foam-wash", "basic wash": "foam-wash",
    "premium": "premium-wash", "full wash": "premium-wash",
    "interior": "interior-detail", "vacuum": "interior-detail", "shampoo": "interior-detail",
    "ac": "ac-gas-check", "aircon": "ac-gas-check",
    "polish": "machine-polish", "swirl": "machine-polish",
    "ceramic": "ceramic-coating", "coating": "ceramic-coating",
    "salt": "salt-mark-remover", "water spots": "salt-mark-remover",
}


def get_all_services() -> list[dict]:
    """Return all services with basic info."""
    return [
        {
            "id": sid,
            "name": info["name"],
            "duration_minutes": info["duration_minutes"],
            "category": info["category"],
        }
        for sid, info in SERVICE_CATALOG.items()
    ]


def get_service(service_id: str) -> Optional[dict]:
    """Get full details for a service by catalog ID."""
    info = SERVICE_CATALOG.get(service_id.lower().strip())
    if info is None:
        return None
    return {"id": service_id.lower().strip(), **info}


def match_service(query: str) -> Optional[str]:
    """Match a free-text query to a service ID. Returns None if no match."""
    normalized = query.lower().strip()
    if normalized in SERVICE_CATALOG:
        return normalized
    for alias, service_id in SERVICE_ALIASES.items():
        if re.search(rf"\b{re.escape(alias)}\b", normalized):
            return service_id
    for sid, info in SERVICE_CATALOG.items():
        if normalized in info["name"].lower():
            return sid
    logger.debug("No service matched %r", query)
    return None
