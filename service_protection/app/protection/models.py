"""
Data models for unit-based operation protection.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from shared.config import ProtectionConfig, get_cached_config
from shared.errors import ErrorCodes, ForbiddenError


class Unit(BaseModel):
    """Organizational unit carrying per-operation protection flags."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., description="Unit ID")
    name: Optional[str] = Field(None, description="Unit name")
    protect_create: bool = Field(True, alias="protectCreate")
    protect_read: bool = Field(False, alias="protectRead")
    protect_update: bool = Field(True, alias="protectUpdate")
    protect_delete: bool = Field(True, alias="protectDelete")


class UnitAssignment(BaseModel):
    """Assignment of a resource (record) to a unit."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    resource_id: str = Field(..., alias="recordId")
    unit_id: str = Field(..., alias="acquisitionsUnitId")


class UnitMembership(BaseModel):
    """Membership of a user in a unit."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    user_id: str = Field(..., alias="userId")
    unit_id: str = Field(..., alias="acquisitionsUnitId")


class OperationType(str, Enum):
    """Operation types a unit can protect."""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"

    def is_protected(self, unit: Unit) -> bool:
        """Return the unit's protection flag for this operation."""
        return getattr(unit, f"protect_{self.value}")


@dataclass(frozen=True)
class IdentityContext:
    """Acting user as resolved from request-scoped headers."""
    user_id: Optional[str] = None
    tenant_id: Optional[str] = None
    request_id: Optional[str] = None

    @classmethod
    def from_headers(cls, headers: Optional[Mapping[str, str]],
                     config: Optional[ProtectionConfig] = None) -> "IdentityContext":
        """Build the context from request headers, matching names case-insensitively."""
        config = config or get_cached_config()
        normalized = {
            key.lower(): value.strip()
            for key, value in (headers or {}).items()
            if isinstance(value, str) and value.strip()
        }
        return cls(
            user_id=normalized.get(config.user_id_header.lower()),
            tenant_id=normalized.get(config.tenant_header.lower()),
            request_id=normalized.get(config.request_id_header.lower()),
        )

    def require_user_id(self) -> str:
        """Return the user ID or fail with ``ForbiddenError(UNKNOWN_USER)``."""
        if not self.user_id or not self.user_id.strip():
            raise ForbiddenError(ErrorCodes.UNKNOWN_USER)
        return self.user_id


@dataclass(frozen=True)
class ResourceEvaluationRequest:
    """Evaluate an operation on a resource whose units must be looked up."""
    resource_id: str
    operation: OperationType
    identity: IdentityContext


@dataclass(frozen=True)
class UnitIdsEvaluationRequest:
    """Evaluate an operation against an already known set of unit IDs."""
    unit_ids: Sequence[str]
    operation: OperationType
    identity: IdentityContext


EvaluationRequest = Union[ResourceEvaluationRequest, UnitIdsEvaluationRequest]
