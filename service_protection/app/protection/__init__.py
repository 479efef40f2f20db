"""
Protection package.

Defines the unit model, operation types and identity context, the lookup
contracts for assignments, units and memberships, and the engine that
merges unit protection flags and applies the membership override.

Modules of interest:
- models: Units, relations, operation types and evaluation requests.
- contracts: Protocols for the three remote lookups.
- engine: Evaluation pipeline and merging strategy.
"""

from .engine import ProtectionEngine
from .models import (
    EvaluationRequest, IdentityContext, OperationType, ResourceEvaluationRequest,
    Unit, UnitAssignment, UnitIdsEvaluationRequest, UnitMembership
)

__all__ = [
    "ProtectionEngine",
    "EvaluationRequest",
    "IdentityContext",
    "OperationType",
    "ResourceEvaluationRequest",
    "Unit",
    "UnitAssignment",
    "UnitIdsEvaluationRequest",
    "UnitMembership",
]
