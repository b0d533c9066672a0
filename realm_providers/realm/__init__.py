"""Realm navigation core: provider discovery, queries and cursor paging."""

from .dispatch import RemoteDispatcher
from .pager import CursorPager, DrainStep, PartialDrain
from .query import ProviderQueryClient
from .registry import ProviderRegistry
from .resolver import HandleResolver, RealmSchema

__all__ = [
    "CursorPager",
    "DrainStep",
    "HandleResolver",
    "PartialDrain",
    "ProviderQueryClient",
    "ProviderRegistry",
    "RealmSchema",
    "RemoteDispatcher",
]
