"""Scope resolution: which sites and contexts a report covers."""

import logging
from typing import Iterable, List, Sequence, Set

from .models import Context, SiteNode


logger = logging.getLogger(__name__)


class ScopeResolver:
    """Turns the user's site/context selection into the report scope.

    An empty site selection means "all sites". Contexts only describe the
    report; they restrict which sites are offered upstream and never prune
    the alert tree, so an empty context selection stays empty.
    """

    @staticmethod
    def site_names(root: SiteNode) -> List[str]:
        """Selectable sites: the direct children of the synthetic root, in order."""
        return [child.name for child in root.children]

    @staticmethod
    def resolve(selected_sites: Iterable[str], all_sites: Sequence[str]) -> Set[str]:
        """Return the set of sites to include."""
        selected = set(selected_sites)
        if not selected:
            return set(all_sites)
        return selected

    @staticmethod
    def resolve_ordered(selected_sites: Iterable[str], all_sites: Sequence[str]) -> List[str]:
        """Return the sites to include in display order.

        Selected sites keep the order of ``all_sites``; selected names the
        session does not know are appended in selection order.
        """
        selected = list(dict.fromkeys(selected_sites))
        if not selected:
            return list(dict.fromkeys(all_sites))

        wanted = set(selected)
        ordered = [site for site in dict.fromkeys(all_sites) if site in wanted]
        known = set(ordered)
        ordered.extend(site for site in selected if site not in known)
        return ordered

    @staticmethod
    def resolve_contexts(selected_names: Iterable[str],
                         contexts: Sequence[Context]) -> List[Context]:
        """Return the selected contexts in session order."""
        wanted = set(selected_names)
        resolved = [context for context in contexts if context.name in wanted]

        missing = wanted - {context.name for context in resolved}
        if missing:
            logger.debug(f"Ignoring unknown contexts: {sorted(missing)}")
        return resolved
