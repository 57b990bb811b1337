"""
Firestore query helpers shared by the services.

NOTE: For firebase_admin SDK, we use positional arguments which still work.
The deprecation warning is just a warning - the functionality is still supported.
"""

from typing import Dict, Optional, Tuple


def where_filter(query, field_path: str, op_string: str, value):
    """
    Helper function for Firestore queries.

    Usage:
        query = where_filter(collection, "phone", "==", "919876543210")
    """
    return query.where(field_path, op_string, value)


def first_match(query) -> Optional[Tuple[str, Dict]]:
    """Return (doc_id, data) for the first document a query yields, or None."""
    for doc in query.limit(1).stream():
        return doc.id, doc.to_dict()
    return None


def normalize_phone(phone_number: str) -> str:
    """Strip formatting so one number always maps to one identity."""
    return (
        phone_number.strip()
        .replace(" ", "")
        .replace("-", "")
        .replace("(", "")
        .replace(")", "")
        .replace("+", "")
    )
