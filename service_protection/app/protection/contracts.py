"""
Lookup contracts the protection engine depends on.

Implementations live with the caller (HTTP clients, storage adapters, test
doubles). Any exception they raise reaches the engine's caller unchanged.
"""

from typing import Collection, Protocol, Sequence

from .models import Unit


class UnitAssignmentLookup(Protocol):
    """Resolves the units a resource is assigned to."""

    async def lookup_assigned_units(self, resource_id: str) -> Collection[str]:
        ...


class UnitLookup(Protocol):
    """Fetches unit objects by ID."""

    async def lookup_units(self, unit_ids: Sequence[str]) -> Sequence[Unit]:
        ...


class MembershipLookup(Protocol):
    """Returns the IDs among ``unit_ids`` the user is a member of."""

    async def lookup_memberships(self, user_id: str, unit_ids: Sequence[str]) -> Collection[str]:
        ...
