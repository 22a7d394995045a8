"""Action proposals and attack resolution."""

from tactics.actions.base import ActionProposal
from tactics.actions.combat import AttackResolver, AttackResult, CoverResult

__all__ = ["ActionProposal", "AttackResolver", "AttackResult", "CoverResult"]
