"""
Configuration management for code generation.

Handles loading and merging settings from JSON files,
providing defaults and validation for generator settings.
"""

import json
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

PLUGIN_NAME = "go-codegen"


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GoSettings:
    """Settings for one generation run."""

    # Required: the Go module and the service shape to generate
    module_name: str = ""
    service: str = ""

    # Package clause; derived from the module name when empty
    package_name: str = ""

    # Protocol selection; the first protocol trait on the service when empty
    protocol: Optional[str] = None

    # Overrides the identifier returned by the generated ServiceID()
    service_id: Optional[str] = None

    # go.mod settings
    go_version: str = "1.15"

    # Code style settings
    indent_text: str = "\t"
    add_comments: bool = True

    # Integration import strings, "package.module:attribute"
    integrations: List[str] = field(default_factory=list)

    output_dir: Optional[str] = None

    # Custom settings (unrecognized keys)
    custom: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.package_name and self.module_name:
            self.package_name = default_package_name(self.module_name)

    @property
    def types_package_path(self) -> str:
        return f"{self.module_name}/types"


def default_package_name(module_name: str) -> str:
    """
    Derive the default package import name from a module path.

    Uses the last path element, lower-cased with non-identifier characters
    removed, skipping major version suffixes such as ``/v2``.
    """
    parts = [p for p in module_name.strip("/").split("/") if p]
    if len(parts) > 1 and re.fullmatch(r"v\d+", parts[-1]):
        parts = parts[:-1]
    last = parts[-1] if parts else ""
    return re.sub(r"[^a-z0-9_]", "", last.lower())


class ConfigManager:
    """Manages settings loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._defaults: Dict[str, Any] = {
            "go_version": "1.15",
            "indent_text": "\t",
            "add_comments": True,
        }

    def get_settings(
        self,
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GoSettings:
        """
        Get complete settings for a run.

        Args:
            custom_config: Overrides applied last
            config_file: Path to JSON settings file

        Returns:
            Merged settings
        """
        base_config = dict(self._defaults)

        if config_file:
            base_config.update(self._load_config_file(config_file))

        if custom_config:
            base_config.update({k: v for k, v in custom_config.items() if v is not None})

        settings = self._dict_to_settings(base_config)

        missing = [name for name in ("module_name", "service") if not getattr(settings, name)]
        if missing:
            raise ConfigError(f"Missing required settings: {', '.join(missing)}")

        return settings

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load settings from a JSON file.

        Accepts the settings object itself or a build file holding it under
        ``plugins.go-codegen``.
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        plugins = config.get("plugins")
        if isinstance(plugins, dict) and PLUGIN_NAME in plugins:
            config = plugins[PLUGIN_NAME]
            if not isinstance(config, dict):
                raise ConfigError(f"'{PLUGIN_NAME}' settings must be an object: {path}")

        return _normalize_keys(config)

    def _dict_to_settings(self, config_dict: Dict[str, Any]) -> GoSettings:
        """Convert dictionary to GoSettings instance."""
        known_fields = {f.name for f in fields(GoSettings)}

        config_args: Dict[str, Any] = {}
        custom_args: Dict[str, Any] = {}

        for key, value in _normalize_keys(config_dict).items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GoSettings(**config_args)

    def save_settings(self, settings: GoSettings, output_path: Union[str, Path]):
        """Save settings to a JSON file."""
        path = Path(output_path)

        config_dict = {
            f.name: getattr(settings, f.name) for f in fields(GoSettings) if f.name != "custom"
        }
        config_dict.update(settings.custom)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def validate_settings(self, settings: GoSettings) -> List[str]:
        """
        Validate settings.

        Returns:
            List of validation warnings
        """
        from ..languages.go.naming import validate_go_package_name

        warnings = validate_go_package_name(settings.package_name)

        if "#" not in settings.service:
            warnings.append(f"Service should be an absolute shape id: {settings.service}")

        if not re.fullmatch(r"\d+\.\d+", settings.go_version):
            warnings.append(f"Invalid go_version: {settings.go_version}")

        for entry in settings.integrations:
            if ":" not in entry:
                warnings.append(f"Integration '{entry}' should look like 'module:attribute'")

        return warnings


def _normalize_keys(config: Dict[str, Any]) -> Dict[str, Any]:
    """Accept camelCase keys such as ``moduleName`` as well as snake_case."""
    aliases = {
        "module": "module_name",
        "moduleName": "module_name",
        "packageName": "package_name",
        "serviceId": "service_id",
        "goVersion": "go_version",
        "outputDir": "output_dir",
    }
    return {aliases.get(key, key): value for key, value in config.items()}


def load_settings(
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GoSettings:
    """
    Convenience function to load settings.

    Args:
        custom_config: Overrides applied last
        config_file: Path to JSON settings file

    Returns:
        Merged settings
    """
    return ConfigManager().get_settings(custom_config, config_file)


# Example settings file for reference
EXAMPLE_SETTINGS = {
    "module": "github.com/example/weather",
    "service": "example.weather#Weather",
    "protocol": "aws.protocols#restJson1",
    "goVersion": "1.15",
}
