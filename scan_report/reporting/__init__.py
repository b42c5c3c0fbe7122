"""Scan report scope/severity filtering and generation."""

from .models import (
    RiskLevel, ConfidenceLevel, Context, SiteNode, AlertNode,
    FilterCriteria, ReportData
)
from .scope import ScopeResolver
from .severity import SeverityFilter
from .alert_filter import AlertTreeFilter, filter_alert_tree
from .naming import ReportNamer, DEFAULT_NAME_PATTERN
from .validator import ReportValidator
from .assembler import ReportAssembler
from .settings import ReportSettings
from .templates import ReportTemplate, TemplateRegistry
from .renderer import ReportRenderer, JinjaReportRenderer
from .session import SessionProvider, AlertStore, SessionSnapshot, load_session
from .generator import (
    ReportGenerator, ReportRequest, GenerationResult, PreparedReport, create_generator
)

__all__ = [
    'RiskLevel', 'ConfidenceLevel', 'Context', 'SiteNode', 'AlertNode',
    'FilterCriteria', 'ReportData',
    'ScopeResolver', 'SeverityFilter', 'AlertTreeFilter', 'filter_alert_tree',
    'ReportNamer', 'DEFAULT_NAME_PATTERN', 'ReportValidator', 'ReportAssembler',
    'ReportSettings', 'ReportTemplate', 'TemplateRegistry',
    'ReportRenderer', 'JinjaReportRenderer',
    'SessionProvider', 'AlertStore', 'SessionSnapshot', 'load_session',
    'ReportGenerator', 'ReportRequest', 'GenerationResult', 'PreparedReport',
    'create_generator'
]
