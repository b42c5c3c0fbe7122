"""Read-only session snapshots: contexts, site tree and alert tree."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List, Tuple, Union

import yaml

from .models import AlertNode, Context, SiteNode, RiskLevel, ConfidenceLevel
from ..core.exceptions import SessionLoadError


logger = logging.getLogger(__name__)

SITE_ROOT_NAME = 'Sites'
ALERT_ROOT_NAME = 'Alerts'


class SessionProvider(ABC):
    """Source of the session's contexts and site tree."""

    @abstractmethod
    def get_contexts(self) -> List[Context]:
        pass

    @abstractmethod
    def get_site_tree(self) -> SiteNode:
        pass


class AlertStore(ABC):
    """Source of the session's findings tree."""

    @abstractmethod
    def get_alert_tree(self) -> AlertNode:
        pass


@dataclass(frozen=True)
class SessionSnapshot(SessionProvider, AlertStore):
    """Immutable in-memory session, safe to share with worker threads."""
    contexts: Tuple[Context, ...] = ()
    site_root: SiteNode = field(default_factory=lambda: SiteNode(SITE_ROOT_NAME))
    alert_root: AlertNode = field(
        default_factory=lambda: AlertNode(ALERT_ROOT_NAME, category=True)
    )

    def __post_init__(self):
        object.__setattr__(self, 'contexts', tuple(self.contexts))

    def get_contexts(self) -> List[Context]:
        return list(self.contexts)

    def get_site_tree(self) -> SiteNode:
        return self.site_root

    def get_alert_tree(self) -> AlertNode:
        return self.alert_root


def _parse_context(data: Dict[str, Any]) -> Context:
    return Context(
        name=str(data['name']),
        context_id=data.get('id'),
        include_patterns=tuple(data.get('include', []) or [])
    )


def _parse_site(data: Union[str, Dict[str, Any]]) -> SiteNode:
    if isinstance(data, str):
        return SiteNode(data)
    children = data.get('children', []) or []
    return SiteNode(str(data['name']), tuple(_parse_site(child) for child in children))


def _parse_alert(data: Dict[str, Any]) -> AlertNode:
    children = data.get('children', []) or []
    return AlertNode(
        name=str(data['name']),
        risk=RiskLevel.parse(data.get('risk', -1)),
        confidence=ConfidenceLevel.parse(data.get('confidence', -1)),
        site=data.get('site'),
        uri=data.get('uri'),
        alert_id=data.get('id'),
        category=bool(data.get('category', bool(children))),
        children=tuple(_parse_alert(child) for child in children)
    )


def session_from_dict(data: Dict[str, Any]) -> SessionSnapshot:
    """Build a snapshot from a session export mapping.

    Expected keys are ``contexts`` (list of ``{name, id, include}``),
    ``sites`` (top-level site nodes, each a name or ``{name, children}``)
    and ``alerts`` (category and alert nodes with ``risk``, ``confidence``,
    ``site``, ``uri``, ``id`` and ``children``). Risk and confidence accept
    ordinals or level names.
    """
    contexts = tuple(_parse_context(item) for item in data.get('contexts', []) or [])
    sites = tuple(_parse_site(item) for item in data.get('sites', []) or [])
    alerts = tuple(_parse_alert(item) for item in data.get('alerts', []) or [])

    return SessionSnapshot(
        contexts=contexts,
        site_root=SiteNode(SITE_ROOT_NAME, sites),
        alert_root=AlertNode(ALERT_ROOT_NAME, category=True, children=alerts)
    )


def load_session(path: Union[str, Path]) -> SessionSnapshot:
    """Load a YAML or JSON session export.

    Raises:
        SessionLoadError: If the file cannot be read or is malformed
    """
    file_path = Path(path)
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise SessionLoadError(str(file_path), str(e)) from e

    if not isinstance(data, dict):
        raise SessionLoadError(str(file_path), "top level must be a mapping")

    try:
        snapshot = session_from_dict(data)
    except (KeyError, TypeError, AttributeError) as e:
        raise SessionLoadError(str(file_path), f"malformed entry: {e!r}") from e

    logger.info(
        f"Loaded session {file_path}: {len(snapshot.contexts)} contexts, "
        f"{len(snapshot.site_root.children)} sites, {snapshot.alert_root.count_alerts()} alerts"
    )
    return snapshot
