"""Persisted report defaults."""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Any, Iterable, FrozenSet

from .models import FilterCriteria, RISK_ORDINALS, CONFIDENCE_ORDINALS
from .naming import DEFAULT_NAME_PATTERN
from ..core.config import ConfigManager

SETTINGS_SECTION = 'reports'


@dataclass(frozen=True)
class ReportSettings:
    """Report options restored at startup and saved after each generation."""
    title: str = "Scan Report"
    description: str = ""
    template: str = "traditional-html"
    report_directory: str = field(default_factory=lambda: str(Path.home()))
    template_directory: str = "templates"
    report_name_pattern: str = DEFAULT_NAME_PATTERN
    display_report: bool = False
    included_risks: FrozenSet[int] = RISK_ORDINALS
    included_confidences: FrozenSet[int] = CONFIDENCE_ORDINALS

    def __post_init__(self):
        object.__setattr__(self, 'included_risks', frozenset(self.included_risks))
        object.__setattr__(self, 'included_confidences', frozenset(self.included_confidences))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReportSettings':
        """Create settings from a ``reports`` config section; missing keys use defaults."""
        defaults = cls()
        return cls(
            title=str(data.get('title', defaults.title)),
            description=str(data.get('description', defaults.description) or ''),
            template=str(data.get('template', defaults.template)),
            report_directory=str(data.get('report_directory', defaults.report_directory)),
            template_directory=str(data.get('template_directory', defaults.template_directory)),
            report_name_pattern=str(data.get('report_name_pattern',
                                             defaults.report_name_pattern)),
            display_report=bool(data.get('display_report', defaults.display_report)),
            included_risks=data.get('included_risks', defaults.included_risks),
            included_confidences=data.get('included_confidences',
                                          defaults.included_confidences)
        )

    @classmethod
    def from_config(cls, config: ConfigManager) -> 'ReportSettings':
        return cls.from_dict(config.get_section(SETTINGS_SECTION))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'title': self.title,
            'description': self.description,
            'template': self.template,
            'report_directory': self.report_directory,
            'template_directory': self.template_directory,
            'report_name_pattern': self.report_name_pattern,
            'display_report': self.display_report,
            'included_risks': sorted(self.included_risks),
            'included_confidences': sorted(self.included_confidences)
        }

    def save(self, config: ConfigManager) -> Path:
        """Write the settings into the config and persist it.

        Raises:
            ConfigPersistenceError: If the configuration file cannot be written
        """
        config.update_section(SETTINGS_SECTION, self.to_dict())
        return config.save()

    def to_criteria(self, contexts: Iterable[str] = (),
                    sites: Iterable[str] = ()) -> FilterCriteria:
        """Filter criteria for the stored severity defaults and a scope selection."""
        return FilterCriteria(
            contexts=frozenset(contexts),
            sites=tuple(sites),
            risks=self.included_risks,
            confidences=self.included_confidences
        )

    def with_overrides(self, **changes: Any) -> 'ReportSettings':
        """Copy with the given fields replaced; ``None`` values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

