"""
Test helper functions and factory methods for the Unit Protection Service.
"""

from typing import Collection, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .protection.models import (
    IdentityContext, Unit, UnitAssignment, UnitMembership
)


class TestDataFactory:
    """Factory for creating test data."""

    @staticmethod
    def create_unit(unit_id: str, protected: bool = True, **flags) -> Unit:
        """Create a unit with every protection flag set to ``protected`` unless overridden."""
        values = {
            "protect_create": protected,
            "protect_read": protected,
            "protect_update": protected,
            "protect_delete": protected,
        }
        values.update(flags)
        return Unit(id=unit_id, name=f"Unit {unit_id}", **values)

    @staticmethod
    def create_identity(user_id: Optional[str] = "alice", tenant_id: str = "diku") -> IdentityContext:
        """Create an identity context for a user."""
        return IdentityContext(user_id=user_id, tenant_id=tenant_id, request_id=f"req-{user_id}")

    @staticmethod
    def create_test_units() -> List[Unit]:
        """Create the units used by the scenario tests."""
        return [
            Unit(id="U1", name="Main library", protect_update=True),
            Unit(id="U2", name="Law library", protect_update=False),
            Unit(id="U3", name="Special collections", protect_delete=True),
            Unit(id="U4", name="Medical library"),
            Unit(id="U5", name="Music library"),
        ]


class InMemoryUnitDirectory:
    """In-memory implementation of the assignment, unit and membership lookups.

    Every call is recorded in ``calls`` as ``(lookup, argument)``. Setting
    ``failures[lookup]`` to an exception makes that lookup raise it.
    """

    def __init__(self, units: Iterable[Unit] = (),
                 assignments: Iterable[UnitAssignment] = (),
                 memberships: Iterable[UnitMembership] = ()):
        self.units: Dict[str, Unit] = {unit.id: unit for unit in units}
        self.assignments: List[UnitAssignment] = list(assignments)
        self.memberships: List[UnitMembership] = list(memberships)
        self.hidden_unit_ids: Set[str] = set()
        self.failures: Dict[str, Exception] = {}
        self.calls: List[Tuple[str, object]] = []

    def assign(self, resource_id: str, *unit_ids: str) -> "InMemoryUnitDirectory":
        self.assignments.extend(UnitAssignment(resource_id=resource_id, unit_id=u) for u in unit_ids)
        return self

    def add_member(self, user_id: str, *unit_ids: str) -> "InMemoryUnitDirectory":
        self.memberships.extend(UnitMembership(user_id=user_id, unit_id=u) for u in unit_ids)
        return self

    def lookups(self) -> List[str]:
        """Names of the lookups issued so far, in order."""
        return [name for name, _ in self.calls]

    async def lookup_assigned_units(self, resource_id: str) -> Collection[str]:
        self._record("assignments", resource_id)
        return [a.unit_id for a in self.assignments if a.resource_id == resource_id]

    async def lookup_units(self, unit_ids: Sequence[str]) -> Sequence[Unit]:
        self._record("units", tuple(unit_ids))
        return [
            self.units[unit_id] for unit_id in unit_ids
            if unit_id in self.units and unit_id not in self.hidden_unit_ids
        ]

    async def lookup_memberships(self, user_id: str, unit_ids: Sequence[str]) -> Collection[str]:
        self._record("memberships", (user_id, tuple(unit_ids)))
        return {
            m.unit_id for m in self.memberships
            if m.user_id == user_id and m.unit_id in unit_ids
        }

    def _record(self, lookup: str, argument: object) -> None:
        self.calls.append((lookup, argument))
        if lookup in self.failures:
            raise self.failures[lookup]

