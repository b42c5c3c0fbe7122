"""Core data models for scan report filtering."""

from datetime import datetime
from typing import Dict, Any, Optional, Tuple, FrozenSet, Iterable, Iterator, Union
from dataclasses import dataclass, field
from enum import IntEnum

from ..core.exceptions import InvalidFilterCriteriaError


class RiskLevel(IntEnum):
    """Risk ordinals of a finding."""
    INFORMATIONAL = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @property
    def label(self) -> str:
        return self.name.title()

    @classmethod
    def parse(cls, value: Union[int, str]) -> int:
        """Parse an ordinal or a level name; unknown values yield -1."""
        return _parse_level(cls, value, {'info': cls.INFORMATIONAL})


class ConfidenceLevel(IntEnum):
    """Confidence ordinals of a finding."""
    FALSE_POSITIVE = 0
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CONFIRMED = 4

    @property
    def label(self) -> str:
        return self.name.replace('_', ' ').title()

    @classmethod
    def parse(cls, value: Union[int, str]) -> int:
        """Parse an ordinal or a level name; unknown values yield -1."""
        return _parse_level(cls, value, {'falsepositive': cls.FALSE_POSITIVE})


RISK_ORDINALS: FrozenSet[int] = frozenset(int(level) for level in RiskLevel)
CONFIDENCE_ORDINALS: FrozenSet[int] = frozenset(int(level) for level in ConfidenceLevel)

UNKNOWN_LEVEL = -1


def _parse_level(enum_cls, value: Union[int, str], aliases: Dict[str, IntEnum]) -> int:
    if isinstance(value, bool):
        return UNKNOWN_LEVEL
    if isinstance(value, int):
        return int(value)
    if not isinstance(value, str):
        return UNKNOWN_LEVEL

    text = value.strip()
    if text.lstrip('-').isdigit():
        return int(text)

    key = text.upper().replace(' ', '_').replace('-', '_')
    if key in enum_cls.__members__:
        return int(enum_cls[key])

    alias = aliases.get(text.lower().replace(' ', '').replace('_', '').replace('-', ''))
    if alias is not None:
        return int(alias)
    return UNKNOWN_LEVEL


def risk_label(value: int) -> str:
    """Display name of a risk ordinal, or 'Unknown'."""
    try:
        return RiskLevel(value).label
    except ValueError:
        return 'Unknown'


def confidence_label(value: int) -> str:
    """Display name of a confidence ordinal, or 'Unknown'."""
    try:
        return ConfidenceLevel(value).label
    except ValueError:
        return 'Unknown'


@dataclass(frozen=True)
class Context:
    """Named grouping of sites within a scan session."""
    name: str
    context_id: Optional[int] = None
    include_patterns: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'include_patterns', tuple(self.include_patterns))


@dataclass(frozen=True)
class SiteNode:
    """Node of the scanned site tree; the root is synthetic."""
    name: str
    children: Tuple['SiteNode', ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'children', tuple(self.children))


@dataclass(frozen=True)
class AlertNode:
    """Node of the findings tree.

    Category nodes group alerts; their own risk and confidence are ignored
    by the filter. A node is a leaf alert when it is not flagged as a
    category and has no children.
    """
    name: str
    risk: int = UNKNOWN_LEVEL
    confidence: int = UNKNOWN_LEVEL
    site: Optional[str] = None
    uri: Optional[str] = None
    alert_id: Optional[int] = None
    category: bool = False
    children: Tuple['AlertNode', ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'children', tuple(self.children))

    @property
    def is_leaf(self) -> bool:
        return not self.category and not self.children

    @property
    def child_count(self) -> int:
        return len(self.children)

    def iter_leaves(self) -> Iterator['AlertNode']:
        """Yield leaf alerts in depth-first, original order."""
        stack = [self]
        while stack:
            node = stack.pop()
            if node.is_leaf:
                yield node
            else:
                stack.extend(reversed(node.children))

    def count_alerts(self) -> int:
        return sum(1 for _ in self.iter_leaves())

    def copy_without_children(self) -> 'AlertNode':
        return self.with_children(())

    def with_children(self, children: Iterable['AlertNode']) -> 'AlertNode':
        return AlertNode(
            name=self.name,
            risk=self.risk,
            confidence=self.confidence,
            site=self.site,
            uri=self.uri,
            alert_id=self.alert_id,
            category=self.category,
            children=tuple(children)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the subtree to plain dictionaries for templates."""
        return {
            'name': self.name,
            'risk': self.risk,
            'risk_name': risk_label(self.risk),
            'confidence': self.confidence,
            'confidence_name': confidence_label(self.confidence),
            'site': self.site,
            'uri': self.uri,
            'alert_id': self.alert_id,
            'category': self.category,
            'children': [child.to_dict() for child in self.children]
        }


def _validated_ordinals(values: Iterable[int], allowed: FrozenSet[int],
                        field_name: str) -> FrozenSet[int]:
    values = frozenset(values)
    invalid = {v for v in values if isinstance(v, bool) or v not in allowed}
    if invalid:
        raise InvalidFilterCriteriaError(field_name, invalid)
    return frozenset(int(v) for v in values)


@dataclass(frozen=True)
class FilterCriteria:
    """Scope and severity selection for one generation request.

    Empty ``contexts``/``sites`` mean unconstrained; empty ``risks`` or
    ``confidences`` mean nothing matches.
    """
    contexts: FrozenSet[str] = frozenset()
    sites: Tuple[str, ...] = ()
    risks: FrozenSet[int] = RISK_ORDINALS
    confidences: FrozenSet[int] = CONFIDENCE_ORDINALS

    def __post_init__(self):
        object.__setattr__(self, 'contexts', frozenset(self.contexts))
        object.__setattr__(self, 'sites', tuple(dict.fromkeys(self.sites)))
        object.__setattr__(self, 'risks',
                           _validated_ordinals(self.risks, RISK_ORDINALS, 'risks'))
        object.__setattr__(self, 'confidences',
                           _validated_ordinals(self.confidences, CONFIDENCE_ORDINALS,
                                               'confidences'))


@dataclass(frozen=True)
class ReportData:
    """Filtered payload handed to the renderer."""
    title: str
    description: str
    contexts: Tuple[Context, ...]
    sites: Tuple[str, ...]
    risks: FrozenSet[int]
    confidences: FrozenSet[int]
    root: AlertNode
    generated_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        object.__setattr__(self, 'contexts', tuple(self.contexts))
        object.__setattr__(self, 'sites', tuple(self.sites))
        object.__setattr__(self, 'risks', frozenset(self.risks))
        object.__setattr__(self, 'confidences', frozenset(self.confidences))

    def is_include_risk(self, level: int) -> bool:
        return level in self.risks

    def is_include_confidence(self, level: int) -> bool:
        return level in self.confidences

    @property
    def has_alerts(self) -> bool:
        return self.root.child_count > 0

    def get_summary_statistics(self) -> Dict[str, Any]:
        """Count the retained alerts per risk level."""
        risk_counts = {level.label: 0 for level in RiskLevel}
        total = 0
        for leaf in self.root.iter_leaves():
            total += 1
            label = risk_label(leaf.risk)
            risk_counts[label] = risk_counts.get(label, 0) + 1

        return {
            'total_alerts': total,
            'risk_breakdown': risk_counts,
            'sites': len(self.sites),
            'contexts': len(self.contexts)
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert report data to the dictionary templates are rendered with."""
        return {
            'title': self.title,
            'description': self.description,
            'contexts': [context.name for context in self.contexts],
            'sites': list(self.sites),
            'risks': sorted(self.risks),
            'confidences': sorted(self.confidences),
            'alerts': self.root.to_dict(),
            'statistics': self.get_summary_statistics(),
            'generated_at': self.generated_at.isoformat()
        }
