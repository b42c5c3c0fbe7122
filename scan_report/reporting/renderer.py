"""Renderers that turn ``ReportData`` into a report file."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Union

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from .models import ReportData, risk_label, confidence_label
from .templates import ReportTemplate


class ReportRenderer(ABC):
    """Base class for report renderers."""

    def __init__(self):
        self.logger = logging.getLogger(f'{__name__}.{self.__class__.__name__}')

    @abstractmethod
    def render(self, report_data: ReportData, template: ReportTemplate,
               target_path: Union[str, Path]) -> Path:
        """Write the report for ``report_data`` to ``target_path``.

        Returns:
            Path of the written report
        """
        pass


class JinjaReportRenderer(ReportRenderer):
    """Renders a template directory's Jinja2 file with the report data."""

    def _environment(self, template: ReportTemplate) -> Environment:
        env = Environment(
            loader=FileSystemLoader(str(template.path)),
            autoescape=select_autoescape(['html', 'xml']),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True
        )
        env.filters['risk_name'] = risk_label
        env.filters['confidence_name'] = confidence_label
        return env

    def render(self, report_data: ReportData, template: ReportTemplate,
               target_path: Union[str, Path]) -> Path:
        source = template.source_path
        if source is None:
            raise ValueError(f"Template {template} has no template directory")

        env = self._environment(template)
        jinja_template = env.get_template(source.name)
        content = jinja_template.render(report=report_data.to_dict(), data=report_data)

        path = Path(target_path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)

        self.logger.info(f"Rendered {template.config_name} report to {path}")
        return path
