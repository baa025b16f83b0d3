"""
In-memory provider directory.

In production this would be backed by the marketplace's profile database.
Providers, team members and equipment are stored separately by id; a
provider only carries the ids of its rosters and ``get_provider`` resolves
them into a ``ProviderSnapshot`` on every call.
"""

import logging
import threading
from typing import Optional, Union

from pydantic import TypeAdapter

from shootbook.errors import ProviderNotFound, RepositoryTimeout, RepositoryUnavailable
from shootbook.schemas.provider_schema import (
    Equipment,
    PhotographerProfile,
    Provider,
    ProviderKind,
    TeamMember,
    VideographerProfile,
)
from shootbook.stores.base import ProviderSnapshot

logger = logging.getLogger(__name__)

_provider_adapter: TypeAdapter[Provider] = TypeAdapter(Provider)


def parse_provider(data: Union[dict, Provider]) -> Provider:
    """Build the right provider variant from its ``kind`` tag."""
    if isinstance(data, (PhotographerProfile, VideographerProfile)):
        return data
    return _provider_adapter.validate_python(data)


def describe_provider(provider: Provider) -> str:
    kind = ProviderKind(provider.kind)
    if kind == ProviderKind.PHOTOGRAPHER:
        return f"photographer '{provider.business_name}'"
    if kind == ProviderKind.VIDEOGRAPHER:
        return f"videographer '{provider.business_name}'"
    raise ValueError(f"Unknown provider kind: {provider.kind}")


class InMemoryProviderDirectory:
    """Provider directory keyed by id, safe to read from many threads."""

    def __init__(self) -> None:
        self._providers: dict[str, Provider] = {}
        self._team_members: dict[str, TeamMember] = {}
        self._equipment: dict[str, Equipment] = {}
        self._lock = threading.Lock()
        self.unavailable = False

    def _acquire(self, timeout: Optional[float]) -> None:
        if self.unavailable:
            raise RepositoryUnavailable("Provider directory is unavailable.")
        if not self._lock.acquire(timeout=-1 if timeout is None else timeout):
            raise RepositoryTimeout(f"Provider directory did not respond within {timeout}s.")

    def register_provider(self, data: Union[dict, Provider]) -> Provider:
        provider = parse_provider(data)
        self._acquire(None)
        try:
            self._providers[provider.id] = provider
        finally:
            self._lock.release()
        logger.info("Registered %s (%s)", describe_provider(provider), provider.id)
        return provider

    def add_team_member(self, member: TeamMember) -> TeamMember:
        self._acquire(None)
        try:
            provider = self._providers.get(member.owner_id)
            if provider is None:
                raise ProviderNotFound(member.owner_id)
            self._team_members[member.id] = member
            if member.id not in provider.team_member_ids:
                provider.team_member_ids.append(member.id)
        finally:
            self._lock.release()
        logger.debug("Team member %s added to %s", member.id, member.owner_id)
        return member

    def add_equipment(self, item: Equipment) -> Equipment:
        self._acquire(None)
        try:
            provider = self._providers.get(item.owner_id)
            if provider is None:
                raise ProviderNotFound(item.owner_id)
            self._equipment[item.id] = item
            if item.id not in provider.equipment_ids:
                provider.equipment_ids.append(item.id)
        finally:
            self._lock.release()
        logger.debug("Equipment %s added to %s", item.id, item.owner_id)
        return item

    def set_member_active(self, member_id: str, active: bool) -> None:
        self._acquire(None)
        try:
            member = self._team_members[member_id]
            self._team_members[member_id] = member.model_copy(update={"is_active": active})
        finally:
            self._lock.release()
        logger.info("Team member %s active=%s", member_id, active)

    def set_equipment_available(self, item_id: str, available: bool) -> None:
        self._acquire(None)
        try:
            item = self._equipment[item_id]
            self._equipment[item_id] = item.model_copy(update={"is_available": available})
        finally:
            self._lock.release()
        logger.info("Equipment %s available=%s", item_id, available)

    def get_provider(self, provider_id: str, timeout: Optional[float] = None) -> ProviderSnapshot:
        """Resolve a provider and its rosters. Raises ProviderNotFound."""
        self._acquire(timeout)
        try:
            provider = self._providers.get(provider_id)
            if provider is None:
                raise ProviderNotFound(provider_id)
            members = [
                self._team_members[mid]
                for mid in provider.team_member_ids
                if mid in self._team_members
            ]
            equipment = [
                self._equipment[eid]
                for eid in provider.equipment_ids
                if eid in self._equipment
            ]
            return ProviderSnapshot(
                provider=provider.model_copy(deep=True),
                team_members=members,
                equipment=equipment,
            )
        finally:
            self._lock.release()

    def reset(self) -> None:
        """Clear all records. Used by test fixtures for isolation."""
        with self._lock:
            self._providers.clear()
            self._team_members.clear()
            self._equipment.clear()
        self.unavailable = False
