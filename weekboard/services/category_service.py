"""Category lookups. Categories are seeded in the store and read-only here."""

import logging

from weekboard.core import record_store
from weekboard.core.errors import StoreReadError
from weekboard.domain.category import Category


logger = logging.getLogger(__name__)


async def list_categories() -> list[Category]:
    """All categories; empty when the store cannot be read."""
    try:
        return await record_store.list_categories()
    except StoreReadError as e:
        logger.warning("Category list unavailable, returning empty set: %s", e)
        return []
