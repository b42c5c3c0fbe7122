"""Assembly of the filtered report payload."""

import logging
from typing import Optional, Sequence

from .models import AlertNode, Context, FilterCriteria, ReportData
from .scope import ScopeResolver
from .severity import SeverityFilter
from .alert_filter import AlertTreeFilter


logger = logging.getLogger(__name__)


class ReportAssembler:
    """Combines scope resolution and alert filtering into ``ReportData``."""

    def __init__(self, scope_resolver: Optional[ScopeResolver] = None):
        self.scope_resolver = scope_resolver or ScopeResolver()

    def assemble(self, criteria: FilterCriteria, contexts: Sequence[Context],
                 site_names: Sequence[str], alert_root: AlertNode,
                 title: str = "", description: str = "") -> ReportData:
        """Build the report payload for one generation request.

        Args:
            criteria: Scope and severity selection
            contexts: All contexts of the session
            site_names: All selectable sites, in session order
            alert_root: Root of the session's alert tree
            title: Report title
            description: Report description

        Returns:
            ReportData with the filtered alert tree
        """
        sites = self.scope_resolver.resolve_ordered(criteria.sites, site_names)
        resolved_contexts = self.scope_resolver.resolve_contexts(criteria.contexts, contexts)

        severity = SeverityFilter.from_criteria(criteria)
        filtered_root = AlertTreeFilter(sites, severity).filter(alert_root)

        report_data = ReportData(
            title=title,
            description=description,
            contexts=resolved_contexts,
            sites=sites,
            risks=criteria.risks,
            confidences=criteria.confidences,
            root=filtered_root
        )

        logger.debug(
            f"Assembled report data for {len(sites)} sites and "
            f"{len(resolved_contexts)} contexts"
        )
        return report_data
