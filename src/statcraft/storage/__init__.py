"""Record storage for the statcraft engine.

Provides read-only lookup of characters, items, conditions and actions,
loaded from memory or from a JSON document.
"""

from statcraft.storage.catalog import (
    CatalogDocument,
    RecordCatalog,
    fetch_ordered,
    load_catalog,
)

__all__ = [
    "CatalogDocument",
    "RecordCatalog",
    "fetch_ordered",
    "load_catalog",
]
