"""Layered YAML configuration for the scan report system."""

import copy
import logging
import os
import yaml
from typing import Dict, Any, Iterator, Optional, List, Tuple
from pathlib import Path

from ..exceptions import ConfigurationError, ConfigPersistenceError, ConfigValidationError


logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    'system': {
        'environment': 'development',
        'logs_dir': 'logs',
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'file_logging': False,
        'file_rotation': True,
        'max_file_size': '10MB',
        'backup_count': 5,
    },
    'reports': {
        'title': 'Scan Report',
        'description': '',
        'template': 'traditional-html',
        'report_directory': str(Path.home()),
        'template_directory': 'templates',
        'report_name_pattern': '{date}-Scan-Report-{site}',
        'display_report': False,
        'included_risks': [0, 1, 2, 3],
        'included_confidences': [0, 1, 2, 3, 4],
    },
}

# Environment variable -> config key; values are used verbatim
ENV_OVERRIDES: Dict[str, Tuple[str, ...]] = {
    'SCAN_REPORT_LOG_LEVEL': ('logging', 'level'),
    'SCAN_REPORT_REPORT_DIR': ('reports', 'report_directory'),
    'SCAN_REPORT_TEMPLATE_DIR': ('reports', 'template_directory'),
    'SCAN_REPORT_NAME_PATTERN': ('reports', 'report_name_pattern'),
}


def deep_merge(base: Dict[str, Any], update: Dict[str, Any]) -> None:
    """Merge ``update`` into ``base`` in place, recursing into nested mappings."""
    for key, value in update.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            deep_merge(current, value)
        else:
            base[key] = value


def assign(config: Dict[str, Any], key: str, value: Any) -> None:
    """Set a dot-separated key in ``config``, creating intermediate sections."""
    *parents, leaf = key.split('.')
    current = config
    for part in parents:
        current = current.setdefault(part, {})
    current[leaf] = value


class ConfigManager:
    """Configuration loaded from defaults, YAML files and the environment.

    Sources, later ones winning: built-in defaults, ``config/default.yml``,
    ``config/<SCAN_REPORT_ENV>.yml``, the user file passed in, then the
    ``SCAN_REPORT_*`` variables. Only the user file's own contents plus
    explicit changes are written back by :meth:`save`; defaults, the
    environment files and variables never leak into it.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.config: Dict[str, Any] = {}
        self.user_config: Dict[str, Any] = {}
        self.base_dir = Path(__file__).parent.parent.parent.parent
        self._load_configuration()

    def _sources(self) -> Iterator[Path]:
        config_dir = self.base_dir / 'config'
        yield config_dir / 'default.yml'
        yield config_dir / f"{os.getenv('SCAN_REPORT_ENV', 'development')}.yml"

    def _load_configuration(self) -> None:
        self.config = copy.deepcopy(DEFAULT_CONFIG)
        self.user_config = {}

        for source in self._sources():
            loaded = self._load_config_file(source)
            if loaded:
                deep_merge(self.config, loaded)
                logger.debug(f"Merged configuration from {source}")

        if self.config_path:
            self.user_config = self._load_config_file(Path(self.config_path)) or {}
            deep_merge(self.config, copy.deepcopy(self.user_config))

        self._apply_environment()

    def _load_config_file(self, file_path: Path) -> Optional[Dict[str, Any]]:
        """Read one YAML file; None when it does not exist.

        Raises:
            ConfigurationError: If the file is unreadable, not YAML, or not a mapping
        """
        if not file_path.exists():
            return None

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except (yaml.YAMLError, OSError) as e:
            raise ConfigurationError(
                f"Failed to load configuration from {file_path}: {e}"
            ) from e

        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigurationError(
                f"Configuration file {file_path} must contain a mapping at the top level"
            )
        return loaded

    def _apply_environment(self) -> None:
        for env_var, key_path in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value:
                assign(self.config, '.'.join(key_path), value)

    def get(self, key: str, default: Any = None) -> Any:
        """Value at a dot-separated key such as ``'reports.title'``, or ``default``."""
        current: Any = self.config
        for part in key.split('.'):
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]
        return current

    def set(self, key: str, value: Any) -> None:
        """Set a dot-separated key; the change is persisted by :meth:`save`."""
        assign(self.config, key, value)
        assign(self.user_config, key, value)

    def get_section(self, section: str) -> Dict[str, Any]:
        return self.config.get(section, {})

    def update_section(self, section: str, values: Dict[str, Any]) -> None:
        """Overwrite the given keys of a section, keeping the others.

        Only values that differ from the loaded ones are marked for saving,
        so unchanged defaults and environment overrides stay out of the
        user file.
        """
        current = self.config.setdefault(section, {})
        for key, value in values.items():
            if key not in current or current[key] != value:
                self.user_config.setdefault(section, {})[key] = copy.deepcopy(value)
            current[key] = value

    def save(self, path: Optional[str] = None) -> Path:
        """Persist the user file contents and explicit changes as YAML.

        Args:
            path: Destination file, defaults to the file the manager was
                loaded from

        Returns:
            Path of the written file

        Raises:
            ConfigPersistenceError: If there is no destination or it cannot
                be written
        """
        destination = path or self.config_path
        if not destination:
            raise ConfigPersistenceError(None, "no configuration file was specified")

        file_path = Path(destination)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(self.user_config, f, default_flow_style=False, sort_keys=True)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigPersistenceError(str(file_path), str(e)) from e

        logger.debug(f"Configuration saved to {file_path}")
        return file_path

    def reload(self) -> None:
        """Discard in-memory changes and load every source again."""
        self._load_configuration()

    def validate(self) -> List[str]:
        """Validation errors of the current configuration, empty when valid."""
        from .config_validator import ConfigValidator
        return ConfigValidator(self.config).validate()

    def ensure_valid(self) -> None:
        """Raise ConfigValidationError when the configuration has problems."""
        errors = self.validate()
        if errors:
            raise ConfigValidationError(errors)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.config)
