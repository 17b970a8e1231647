"""
YAML configuration parser for the Project File Finder.

This module loads, parses, and validates YAML configuration files. It handles
configuration file discovery, falls back to defaults when no file is found,
and reports problems as ``ConfigurationError`` with helpful messages.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List, Union
import logging
from dataclasses import dataclass
from pydantic import ValidationError

from ..models.config import ProjectConfig


logger = logging.getLogger(__name__)


@dataclass
class ConfigParseResult:
    """
    Result of configuration parsing operation.

    Attributes:
        config: The parsed and validated configuration
        warnings: List of non-fatal warnings
        config_path: Path to the configuration file used
        is_default: Whether default configuration was used
    """
    config: ProjectConfig
    warnings: List[str]
    config_path: Optional[Path]
    is_default: bool


class ConfigurationError(Exception):
    """Raised when configuration parsing or validation fails."""
    pass


class ConfigParser:
    """
    YAML configuration parser with validation and error handling.

    Loads a configuration file given explicitly or discovered in the usual
    locations and converts it into a ``ProjectConfig``.
    """

    DEFAULT_CONFIG_NAMES = [
        '.projfind.yaml',
        '.projfind.yml',
        'projfind.yaml',
        'projfind.yml',
    ]

    KNOWN_SECTIONS = ['patterns', 'project_root', 'prune_dirs', 'commands', 'limits', 'label_separator']

    def __init__(self, strict_mode: bool = False):
        """
        Initialize the configuration parser.

        Args:
            strict_mode: If True, treat warnings as errors
        """
        self.strict_mode = strict_mode
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def search_paths(self) -> List[Path]:
        """Directories searched for a configuration file, in order."""
        return [
            Path.cwd(),
            Path.home(),
            Path.home() / '.config' / 'projfind',
        ]

    def load_config(self, config_path: Optional[Union[str, Path]] = None) -> ConfigParseResult:
        """
        Load and parse configuration from file or use defaults.

        Args:
            config_path: Path to configuration file. If None, searches for default files.

        Returns:
            ConfigParseResult containing parsed configuration and metadata

        Raises:
            ConfigurationError: If configuration is invalid or file cannot be read
        """
        if config_path:
            config_path = Path(config_path).expanduser()
            if not config_path.exists():
                raise ConfigurationError(f"Configuration file not found: {config_path}")
            config_data = self._load_yaml_file(config_path)
            is_default = False
        else:
            config_path, config_data = self._find_and_load_config()
            is_default = config_data is None
            if is_default:
                config_data = {}

        config = self._build_config(config_data, config_path)

        warnings = self._get_warnings(config, config_data, is_default)
        if self.strict_mode and warnings:
            raise ConfigurationError(f"Configuration warnings in strict mode: {'; '.join(warnings)}")

        for warning in warnings:
            self.logger.debug(warning)
        self.logger.info(f"Configuration loaded from {config_path or 'defaults'}")

        return ConfigParseResult(
            config=config,
            warnings=warnings,
            config_path=config_path,
            is_default=is_default
        )

    def _find_and_load_config(self) -> tuple[Optional[Path], Optional[Dict[str, Any]]]:
        """
        Find and load configuration file from default locations.

        Returns:
            Tuple of (config_path, config_data) or (None, None) if not found
        """
        for search_path in self.search_paths():
            for config_name in self.DEFAULT_CONFIG_NAMES:
                config_file = search_path / config_name
                if config_file.is_file():
                    self.logger.info(f"Found configuration file: {config_file}")
                    return config_file, self._load_yaml_file(config_file)

        self.logger.info("No configuration file found, using defaults")
        return None, None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load and parse YAML file.

        Args:
            file_path: Path to YAML file

        Returns:
            Parsed YAML data as dictionary

        Raises:
            ConfigurationError: If file cannot be read or parsed
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file {file_path}: {e}") from e

        if not content.strip():
            self.logger.warning(f"Configuration file is empty: {file_path}")
            return {}

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {file_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file must contain a YAML object, got {type(data).__name__}")
        return data

    def _build_config(self, config_data: Dict[str, Any], config_path: Optional[Path]) -> ProjectConfig:
        """Validate raw data into a ProjectConfig."""
        known = {key: value for key, value in config_data.items() if key in self.KNOWN_SECTIONS}

        # A relative root override is relative to the file that sets it.
        root = known.get('project_root')
        if isinstance(root, str) and config_path is not None:
            root_path = Path(root).expanduser()
            if not root_path.is_absolute():
                known['project_root'] = str(config_path.parent.absolute() / root_path)

        try:
            return ProjectConfig.from_dict(known)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

    def _get_warnings(self, config: ProjectConfig, config_data: Dict[str, Any], is_default: bool) -> List[str]:
        """
        Get non-fatal configuration warnings.

        Args:
            config: The parsed configuration
            config_data: Raw data the configuration was built from
            is_default: Whether default configuration was used

        Returns:
            List of warning messages
        """
        warnings = []

        if is_default:
            warnings.append("No configuration file found, using default settings")

        unknown = sorted(key for key in config_data if key not in self.KNOWN_SECTIONS)
        if unknown:
            warnings.append(f"Unknown configuration keys ignored: {', '.join(unknown)}")

        if not config.patterns:
            warnings.append("No filetype patterns configured - every file will be listed and searched")

        if config.project_root and not Path(config.project_root).is_dir():
            warnings.append(f"Configured project root is not a directory: {config.project_root}")

        return warnings

    def validate_config_file(self, config_path: Union[str, Path]) -> List[str]:
        """
        Validate a configuration file without keeping the result.

        Args:
            config_path: Path to configuration file

        Returns:
            List of validation errors (empty if valid)
        """
        config_path = Path(config_path)
        if not config_path.exists():
            return [f"Configuration file not found: {config_path}"]

        try:
            config_data = self._load_yaml_file(config_path)
            self._build_config(config_data, config_path)
        except ConfigurationError as e:
            return [str(e)]
        return []

    def get_config_template(self) -> str:
        """
        Get a template configuration file with all options and comments.

        Returns:
            YAML template as string
        """
        config_dict = ProjectConfig().to_dict()
        lines = [
            "# Project File Finder Configuration",
            "",
        ]

        sections = [
            ("patterns", "File name globs listed by find-file and searched by grep"),
            ("project_root", "Fixed project root; leave null to detect it"),
            ("prune_dirs", "Directories skipped when walking a tree outside version control"),
            ("commands", "External executables"),
            ("limits", "Limits (timeout_seconds: null means no timeout)"),
            ("label_separator", "Separator between a file name and its directory in labels"),
        ]

        for section_name, comment in sections:
            lines.append(f"# {comment}")
            section_yaml = yaml.dump({section_name: config_dict[section_name]},
                                     default_flow_style=False,
                                     sort_keys=False)
            lines.append(section_yaml.rstrip())
            lines.append("")

        return "\n".join(lines)


def load_config(config_path: Optional[Union[str, Path]] = None, strict_mode: bool = False) -> ConfigParseResult:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to configuration file (optional)
        strict_mode: Whether to treat warnings as errors

    Returns:
        ConfigParseResult containing parsed configuration

    Raises:
        ConfigurationError: If configuration is invalid
    """
    parser = ConfigParser(strict_mode=strict_mode)
    return parser.load_config(config_path)


def validate_config_file(config_path: Union[str, Path]) -> List[str]:
    """Convenience function to validate a configuration file."""
    parser = ConfigParser()
    return parser.validate_config_file(config_path)


def create_config_template(output_path: Union[str, Path]) -> None:
    """
    Create a template configuration file.

    Args:
        output_path: Where to save the template

    Raises:
        ConfigurationError: If template cannot be created
    """
    parser = ConfigParser()
    template_content = parser.get_config_template()

    try:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(template_content)

    except OSError as e:
        raise ConfigurationError(f"Cannot create template file {output_path}: {e}") from e
