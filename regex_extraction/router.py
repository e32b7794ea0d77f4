"""
Routing of evaluated records
"""
from enum import Enum
from typing import Sequence

from .base import MatchOutcome, RoutingDecision


class RoutingPolicy(Enum):
    """When an evaluated record counts as matched"""
    EVALUATED = "evaluated"   # evaluation completed, whatever the outcomes
    ANY_MATCH = "any_match"   # at least one pattern produced a value

    @classmethod
    def parse(cls, value) -> "RoutingPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Invalid routing policy: {value}. Valid options: {[p.value for p in cls]}"
            )


class Router:
    """
    Decides whether a record is matched and which values it exposes

    Under the default EVALUATED policy a record is matched whenever its
    evaluation completed: absent outcomes, or no patterns at all, do not
    make it unmatched. Only a failed evaluation does.
    """

    def __init__(self, policy: RoutingPolicy = RoutingPolicy.EVALUATED):
        self.policy = RoutingPolicy.parse(policy)

    def decide(self, outcomes: Sequence[MatchOutcome]) -> RoutingDecision:
        """
        Route a record whose patterns were all evaluated

        Args:
            outcomes: Per-pattern outcomes in configuration order

        Returns:
            Routing decision carrying the outcomes
        """
        outcomes = tuple(outcomes)

        if self.policy is RoutingPolicy.ANY_MATCH:
            matched = any(o.matched for o in outcomes)
        else:
            matched = True

        return RoutingDecision(matched=matched, outcomes=outcomes)

    def evaluation_failed(self) -> RoutingDecision:
        """Route a record whose evaluation could not complete"""
        return RoutingDecision(matched=False, outcomes=())
