"""Report generation orchestration."""

import asyncio
import logging
import os
import threading
import uuid
from concurrent.futures import Executor
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple, Union

from .models import FilterCriteria, ReportData
from .settings import ReportSettings
from .templates import ReportTemplate, TemplateRegistry
from .naming import ReportNamer
from .validator import ReportValidator
from .assembler import ReportAssembler
from .scope import ScopeResolver
from .renderer import ReportRenderer, JinjaReportRenderer
from .session import SessionProvider, AlertStore, SessionSnapshot

from ..core.config import ConfigManager
from ..core.exceptions import (
    ScanReportError, ReportValidationError, GenerationFailedError,
    TemplateNotFoundError, ConfigPersistenceError, InvalidFilterCriteriaError
)

# Failures detected before anything is written
PREFLIGHT_ERRORS = (TemplateNotFoundError, ReportValidationError, InvalidFilterCriteriaError)


@dataclass(frozen=True)
class ReportRequest:
    """One generation request: stored settings plus the current selection."""
    settings: ReportSettings
    contexts: Tuple[str, ...] = ()
    sites: Tuple[str, ...] = ()
    focused_site: Optional[str] = None
    report_name: Optional[str] = None
    allow_empty: bool = False

    def __post_init__(self):
        object.__setattr__(self, 'contexts', tuple(self.contexts))
        object.__setattr__(self, 'sites', tuple(self.sites))

    @property
    def name_site(self) -> Optional[str]:
        """Site substituted into the name pattern: the focused or last selected one."""
        if self.focused_site:
            return self.focused_site
        return self.sites[-1] if self.sites else None


@dataclass(frozen=True)
class PreparedReport:
    """Validated report ready to be rendered."""
    report_data: ReportData
    template: ReportTemplate
    target_path: Path


@dataclass
class GenerationResult:
    """Outcome of a generation request."""
    success: bool
    target_path: Optional[Path] = None
    report_data: Optional[ReportData] = None
    error: Optional[ScanReportError] = None
    settings_saved: bool = False

    @property
    def message(self) -> str:
        if self.error is not None:
            return self.error.message
        return f"Report generated: {self.target_path}"


class ReportGenerator:
    """Filters, validates and renders scan reports.

    Validation always happens before anything is written. Renderer failures
    are caught here and returned as a failed ``GenerationResult`` so the
    host application keeps running; failures to persist the settings are
    logged and never change the outcome.
    """

    def __init__(self, session: SessionProvider, alert_store: AlertStore,
                 templates: TemplateRegistry,
                 renderer: Optional[ReportRenderer] = None,
                 config: Optional[ConfigManager] = None,
                 namer: Optional[ReportNamer] = None,
                 validator: Optional[ReportValidator] = None,
                 assembler: Optional[ReportAssembler] = None):
        """Initialize report generator.

        Args:
            session: Provider of contexts and the site tree
            alert_store: Provider of the alert tree
            templates: Registry used to resolve the requested template
            renderer: Report renderer, Jinja2 based by default
            config: Configuration the settings are saved into; when None
                settings are not persisted
            namer: Report name pattern expander
            validator: Pre-flight validator
            assembler: ReportData assembler
        """
        self.session = session
        self.alert_store = alert_store
        self.templates = templates
        self.renderer = renderer or JinjaReportRenderer()
        self.config = config
        self.namer = namer or ReportNamer()
        self.validator = validator or ReportValidator()
        self.assembler = assembler or ReportAssembler()
        self.logger = logging.getLogger(__name__)

    def build_criteria(self, request: ReportRequest) -> FilterCriteria:
        return request.settings.to_criteria(request.contexts, request.sites)

    def build_report_data(self, request: ReportRequest) -> ReportData:
        """Assemble the filtered report payload from fresh session snapshots."""
        criteria = self.build_criteria(request)
        site_names = ScopeResolver.site_names(self.session.get_site_tree())

        return self.assembler.assemble(
            criteria,
            self.session.get_contexts(),
            site_names,
            self.alert_store.get_alert_tree(),
            title=request.settings.title,
            description=request.settings.description
        )

    def report_file_name(self, request: ReportRequest, template: ReportTemplate) -> str:
        """Explicit report name, or the name pattern expanded plus the template extension."""
        if request.report_name:
            return request.report_name
        return self.namer.file_name(
            request.settings.report_name_pattern, request.name_site, template.extension
        )

    def target_path(self, request: ReportRequest, template: ReportTemplate) -> Path:
        return Path(request.settings.report_directory) / self.report_file_name(request, template)

    def prepare(self, request: ReportRequest) -> PreparedReport:
        """Resolve, assemble and validate without touching the filesystem.

        Raises:
            TemplateNotFoundError: If the requested template is unknown
            InvalidFilterCriteriaError: If the stored severity settings are malformed
            ReportValidationError: If a pre-flight check fails
        """
        template = self.templates.resolve(request.settings.template)
        report_data = self.build_report_data(request)
        target = self.target_path(request, template)

        self.validator.ensure_valid(target, report_data.root, request.allow_empty)
        return PreparedReport(report_data=report_data, template=template, target_path=target)

    def generate(self, request: ReportRequest) -> GenerationResult:
        """Run the full pipeline for one request and report a single result."""
        start_time = datetime.now()

        try:
            prepared = self.prepare(request)
        except PREFLIGHT_ERRORS as e:
            self.logger.warning(f"Report not generated: {e.message}", extra=e.log_extra())
            return GenerationResult(success=False, error=e)

        return self._render(request, prepared, start_time)

    async def generate_async(self, request: ReportRequest,
                             executor: Optional[Executor] = None) -> GenerationResult:
        """Run :meth:`generate` on a worker thread.

        Cancelling the awaiting task discards the request: a report still
        being rendered is never moved into place and the settings are not
        saved.
        """
        loop = asyncio.get_running_loop()
        start_time = datetime.now()
        cancelled = threading.Event()

        try:
            prepared = await loop.run_in_executor(executor, self.prepare, request)
        except PREFLIGHT_ERRORS as e:
            self.logger.warning(f"Report not generated: {e.message}", extra=e.log_extra())
            return GenerationResult(success=False, error=e)

        try:
            return await loop.run_in_executor(
                executor, self._render, request, prepared, start_time, cancelled
            )
        except asyncio.CancelledError:
            cancelled.set()
            raise

    def _render(self, request: ReportRequest, prepared: PreparedReport,
                start_time: datetime,
                cancelled: Optional[threading.Event] = None) -> GenerationResult:
        template = prepared.template
        target = prepared.target_path
        result = GenerationResult(success=False, target_path=target,
                                  report_data=prepared.report_data)

        # Rendered next to the target and moved into place once complete
        staging = target.with_name(f".{target.name}.{uuid.uuid4().hex}.partial")

        try:
            self.renderer.render(prepared.report_data, template, staging)
            if cancelled is not None and cancelled.is_set():
                self.logger.info(f"Report generation for {target} cancelled")
                return result

            os.replace(staging, target)
            result.success = True
            generation_time = datetime.now() - start_time
            self.logger.info(
                f"Report generated at {target} in "
                f"{generation_time.total_seconds():.2f}s"
            )
        except Exception as e:
            self.logger.error(
                f"Failed to generate a report using template {template.config_name}",
                exc_info=True,
                extra={'template': template.config_name}
            )
            result.error = GenerationFailedError(
                template.config_name, str(e), target_path=str(target)
            )
        finally:
            if staging.exists():
                staging.unlink()

        if cancelled is not None and cancelled.is_set():
            return result

        result.settings_saved = self._save_settings(request.settings, template)
        return result

    def _save_settings(self, settings: ReportSettings, template: ReportTemplate) -> bool:
        if self.config is None:
            return False
        if not self.config.config_path:
            self.logger.debug("No configuration file, report settings not saved")
            return False

        try:
            settings.with_overrides(template=template.config_name).save(self.config)
            return True
        except ConfigPersistenceError as e:
            self.logger.error(f"Failed to save report settings: {e.message}",
                              extra=e.log_extra())
            return False


def create_generator(session: SessionSnapshot,
                     config: ConfigManager,
                     template_dir: Optional[Union[str, Path]] = None,
                     renderer: Optional[ReportRenderer] = None) -> ReportGenerator:
    """Build a generator whose templates come from the configured directory."""
    settings = ReportSettings.from_config(config)
    templates = TemplateRegistry.from_directory(template_dir or settings.template_directory)
    return ReportGenerator(session, session, templates, renderer=renderer, config=config)
