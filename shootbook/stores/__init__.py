from shootbook.stores.base import BookingStore, ProviderDirectory, ProviderSnapshot
from shootbook.stores.booking_store import InMemoryBookingStore
from shootbook.stores.provider_directory import InMemoryProviderDirectory

__all__ = [
    "BookingStore",
    "ProviderDirectory",
    "ProviderSnapshot",
    "InMemoryBookingStore",
    "InMemoryProviderDirectory",
]
