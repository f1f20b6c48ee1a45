"""
Session pricing per field (prices in rupees).
"""

from typing import Any, Dict, List

DEFAULT_PRICE = 999

SESSION_PRICING: Dict[str, Dict[str, Any]] = {
    "DSA": {
        "id": "DSA",
        "name": "Data Structures & Algorithms",
        "price": 999,
        "description": "Comprehensive DSA interview preparation",
    },
    "Data Science": {
        "id": "Data Science",
        "name": "Data Science",
        "price": 1299,
        "description": "Data Science and ML interview preparation",
    },
    "Analytics": {
        "id": "Analytics",
        "name": "Data Analytics",
        "price": 899,
        "description": "Data Analytics interview preparation",
    },
    "System Design": {
        "id": "System Design",
        "name": "System Design",
        "price": 1499,
        "description": "System Design interview preparation",
    },
    "Behavioral": {
        "id": "Behavioral",
        "name": "Behavioral Interview",
        "price": 599,
        "description": "Behavioral and soft skills interview preparation",
    },
}


def get_session_price(field: str) -> int:
    config = SESSION_PRICING.get(field)
    return config["price"] if config else DEFAULT_PRICE


def get_all_session_types() -> List[Dict[str, Any]]:
    return list(SESSION_PRICING.values())
