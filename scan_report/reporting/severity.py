"""Risk and confidence inclusion sets."""

from typing import Iterable, FrozenSet, Sequence, Tuple

from .models import RISK_ORDINALS, CONFIDENCE_ORDINALS, FilterCriteria
from ..core.exceptions import InvalidFilterCriteriaError


class SeverityFilter:
    """Inclusion sets built from the four risk and five confidence flags.

    Risk: 0=Informational, 1=Low, 2=Medium, 3=High.
    Confidence: 0=False Positive, 1=Low, 2=Medium, 3=High, 4=Confirmed.
    """

    def __init__(self, risks: Iterable[int], confidences: Iterable[int]):
        self.risks: FrozenSet[int] = frozenset(risks)
        self.confidences: FrozenSet[int] = frozenset(confidences)

    @classmethod
    def from_flags(cls, risk_flags: Sequence[bool],
                   confidence_flags: Sequence[bool]) -> 'SeverityFilter':
        """Build the filter from flags indexed by ordinal.

        Raises:
            InvalidFilterCriteriaError: If the flag counts do not match the
                number of risk or confidence levels
        """
        if len(risk_flags) != len(RISK_ORDINALS):
            raise InvalidFilterCriteriaError('risk flags', [len(risk_flags)])
        if len(confidence_flags) != len(CONFIDENCE_ORDINALS):
            raise InvalidFilterCriteriaError('confidence flags', [len(confidence_flags)])

        return cls(
            [level for level, flag in enumerate(risk_flags) if flag],
            [level for level, flag in enumerate(confidence_flags) if flag]
        )

    @classmethod
    def from_criteria(cls, criteria: FilterCriteria) -> 'SeverityFilter':
        return cls(criteria.risks, criteria.confidences)

    def matches(self, risk: int, confidence: int) -> bool:
        """Out-of-range ordinals are never in the sets, so they never match."""
        return risk in self.risks and confidence in self.confidences

    def to_flags(self) -> Tuple[Tuple[bool, ...], Tuple[bool, ...]]:
        risk_flags = tuple(level in self.risks for level in sorted(RISK_ORDINALS))
        confidence_flags = tuple(level in self.confidences for level in sorted(CONFIDENCE_ORDINALS))
        return risk_flags, confidence_flags

    def __repr__(self) -> str:
        return f"SeverityFilter(risks={sorted(self.risks)}, confidences={sorted(self.confidences)})"
