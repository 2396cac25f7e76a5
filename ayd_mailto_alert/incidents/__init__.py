"""Best-effort incident message lookup from the Ayd status feed."""

from .exceptions import IncidentLookupError
from .lookup import IncidentLookup, IncidentLookupResult, extract_incidents, find_message

__all__ = [
    "IncidentLookup",
    "IncidentLookupResult",
    "IncidentLookupError",
    "extract_incidents",
    "find_message",
]
