"""Report template registry."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml

from ..core.exceptions import TemplateNotFoundError


logger = logging.getLogger(__name__)

TEMPLATE_DESCRIPTOR = 'template.yaml'


@dataclass(frozen=True)
class ReportTemplate:
    """A report template as offered to the user."""
    config_name: str
    display_name: str
    extension: str
    path: Optional[Path] = None
    template_file: Optional[str] = None
    description: str = ""

    @property
    def source_path(self) -> Optional[Path]:
        """File the renderer loads, when the template lives on disk."""
        if self.path is None:
            return None
        return self.path / (self.template_file or f"report.{self.extension}")

    def __str__(self) -> str:
        return f"{self.display_name} ({self.config_name})"


class TemplateRegistry:
    """Looks templates up by display name or by config name.

    Display names are what users pick from; config names are what gets
    persisted in the settings.
    """

    def __init__(self):
        self._by_config_name: Dict[str, ReportTemplate] = {}
        self._by_display_name: Dict[str, ReportTemplate] = {}

    def register(self, template: ReportTemplate) -> None:
        previous = self._by_config_name.pop(template.config_name, None)
        if previous is not None:
            self._by_display_name.pop(previous.display_name, None)
            logger.warning(f"Replacing report template {previous}")

        self._by_config_name[template.config_name] = template
        self._by_display_name[template.display_name] = template

    def by_display_name(self, display_name: str) -> Optional[ReportTemplate]:
        return self._by_display_name.get(display_name)

    def by_config_name(self, config_name: str) -> Optional[ReportTemplate]:
        return self._by_config_name.get(config_name)

    def resolve(self, name: str) -> ReportTemplate:
        """Find a template by either name.

        Raises:
            TemplateNotFoundError: If no template has that name
        """
        template = self.by_config_name(name) or self.by_display_name(name)
        if template is None:
            raise TemplateNotFoundError(name, self._by_config_name.keys())
        return template

    def display_names(self) -> List[str]:
        return sorted(self._by_display_name)

    def templates(self) -> List[ReportTemplate]:
        return sorted(self._by_config_name.values(), key=lambda t: t.display_name)

    def __len__(self) -> int:
        return len(self._by_config_name)

    def __contains__(self, name: str) -> bool:
        return name in self._by_config_name or name in self._by_display_name

    def load_directory(self, template_dir: Union[str, Path]) -> int:
        """Register every template found below ``template_dir``.

        Each template is a sub-directory named after its config name that
        holds a ``template.yaml`` descriptor::

            name: Traditional HTML Report
            format: html
            description: Alerts grouped by type
            file: report.html

        Directories without a descriptor are skipped; unreadable descriptors
        are logged and skipped.

        Returns:
            Number of templates registered
        """
        base = Path(template_dir)
        if not base.is_dir():
            logger.warning(f"Template directory not found: {base}")
            return 0

        loaded = 0
        for entry in sorted(base.iterdir()):
            descriptor = entry / TEMPLATE_DESCRIPTOR
            if not descriptor.is_file():
                continue

            try:
                template = self._load_template(entry, descriptor)
            except (yaml.YAMLError, OSError, ValueError) as e:
                logger.warning(f"Skipping report template {entry.name}: {e}")
                continue

            self.register(template)
            loaded += 1

        logger.info(f"Loaded {loaded} report templates from {base}")
        return loaded

    def _load_template(self, directory: Path, descriptor: Path) -> ReportTemplate:
        with open(descriptor, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"{descriptor} must contain a mapping")

        extension = data.get('format') or data.get('extension')
        if not extension:
            raise ValueError(f"{descriptor} does not declare a format")

        return ReportTemplate(
            config_name=directory.name,
            display_name=str(data.get('name') or directory.name),
            extension=str(extension).lstrip('.'),
            path=directory,
            template_file=data.get('file'),
            description=str(data.get('description', ''))
        )

    @classmethod
    def from_directory(cls, template_dir: Union[str, Path]) -> 'TemplateRegistry':
        registry = cls()
        registry.load_directory(template_dir)
        return registry
