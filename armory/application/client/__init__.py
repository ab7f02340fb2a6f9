"""Client-side state over the ledger API: feeds, search, reference data."""

from armory.application.client.debounce import SearchDebouncer
from armory.application.client.feed import LiveFeed, LoadState, user_message
from armory.application.client.reference_cache import ReferenceDataCache
from armory.application.client.screen import FilteredScreen, FulfillmentDesk

__all__ = [
    "FilteredScreen",
    "FulfillmentDesk",
    "LiveFeed",
    "LoadState",
    "ReferenceDataCache",
    "SearchDebouncer",
    "user_message",
]
