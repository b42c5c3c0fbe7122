"""Scope and severity pruning of the alert tree."""

import logging
from typing import Collection, Iterable, Optional

from .models import AlertNode
from .severity import SeverityFilter


logger = logging.getLogger(__name__)


class AlertTreeFilter:
    """Builds a filtered copy of an alert tree.

    Leaves survive when their risk, confidence and site are all in scope.
    Categories survive only with at least one surviving child, and the root
    is always kept, possibly empty. Children keep their original order and
    the source tree is never modified.
    """

    def __init__(self, sites: Optional[Collection[str]], severity: SeverityFilter):
        """Initialize the filter.

        Args:
            sites: Site names in scope, or None for all sites
            severity: Risk/confidence inclusion sets
        """
        self.sites = frozenset(sites) if sites is not None else None
        self.severity = severity

    def filter(self, root: AlertNode) -> AlertNode:
        """Return the filtered copy of ``root``."""
        children = self._filter_children(root.children)
        filtered = root.with_children(children)

        if logger.isEnabledFor(logging.DEBUG):
            scope = 'all' if self.sites is None else sorted(self.sites)
            logger.debug(
                f"Alert tree filtered: {filtered.count_alerts()} of {root.count_alerts()} "
                f"alerts kept ({self.severity!r}, sites={scope})"
            )
        return filtered

    def includes(self, node: AlertNode) -> bool:
        """Whether a leaf alert is in scope."""
        if not self.severity.matches(node.risk, node.confidence):
            return False
        return self.sites is None or node.site in self.sites

    def _filter_children(self, children: Iterable[AlertNode]) -> list:
        kept = []
        for child in children:
            filtered = self._filter_node(child)
            if filtered is not None:
                kept.append(filtered)
        return kept

    def _filter_node(self, node: AlertNode) -> Optional[AlertNode]:
        if node.is_leaf:
            return node.copy_without_children() if self.includes(node) else None

        children = self._filter_children(node.children)
        if not children:
            return None
        return node.with_children(children)


def filter_alert_tree(root: AlertNode, sites: Optional[Collection[str]],
                      risks: Iterable[int], confidences: Iterable[int]) -> AlertNode:
    """Filter ``root`` by site scope and risk/confidence inclusion sets."""
    return AlertTreeFilter(sites, SeverityFilter(risks, confidences)).filter(root)
