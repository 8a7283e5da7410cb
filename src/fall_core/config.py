# src/fall_core/config.py
"""
Configuration loader for Fall pickers.

Config directory: $FALL_HOME/config/
All YAML files in the directory share the same namespace.

Example:
  config/default.yaml:
    logging: DEBUG
    pickers:
      grep:
        source: {name: list, options: {items: [...]}}
        projectors:
          - relative_path
          - {name: regexp, options: {excludes: ["\\.git/"]}}
        actions:
          quickfix: {name: quickfix, options: {continue: true}}
          copen: {name: quickfix, options: {after: copen}}
        default_action: copen
"""
import yaml
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .common import get_fall_home_dir
from .exceptions import ConfigError

logger = logging.getLogger(__name__)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra='forbid')

    level: str = "INFO"
    directory: Optional[str] = None
    console: bool = True
    json_format: bool = False

    @model_validator(mode="before")
    @classmethod
    def _accept_level_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"level": data}
        return data


class ComponentRef(BaseModel):
    """Reference to a registered component, with its factory options."""
    model_config = ConfigDict(extra='forbid')

    name: str
    options: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_name(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        return data


class PickerConfig(BaseModel):
    """Configuration of one picker: an origin, its projectors and actions."""
    model_config = ConfigDict(extra='forbid')

    source: Optional[ComponentRef] = None
    curator: Optional[ComponentRef] = None
    projectors: List[ComponentRef] = Field(default_factory=list)
    actions: Dict[str, ComponentRef] = Field(default_factory=dict)
    default_action: Optional[str] = None

    @model_validator(mode="after")
    def _check_picker(self) -> "PickerConfig":
        if (self.source is None) == (self.curator is None):
            raise ValueError("exactly one of 'source' or 'curator' must be set")
        if self.default_action is not None and self.default_action not in self.actions:
            raise ValueError(
                f"default_action '{self.default_action}' is not one of {sorted(self.actions)}"
            )
        return self


class FallConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    pickers: Dict[str, PickerConfig] = Field(default_factory=dict)

    def get_picker(self, name: str) -> Optional[PickerConfig]:
        return self.pickers.get(name)


class ConfigLoader:
    """
    Loads and merges all config files from the config directory.

    All files share the same namespace; a picker may be defined only once.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            config_dir = get_fall_home_dir() / "config"
        self.dir = Path(config_dir)
        self.config = FallConfig()
        self._pickers_by_file: Dict[str, Set[str]] = {}
        self._loaded = False

    def load_all(self) -> FallConfig:
        """Load and merge all YAML files from the config directory."""
        self.config = FallConfig()
        self._pickers_by_file.clear()

        if not self.dir.exists():
            logger.info(f"Config directory not found: {self.dir}. Using defaults.")
            self._loaded = True
            return self.config

        for yaml_file in sorted(self.dir.glob("*.yaml")):
            self._load_file(yaml_file)

        self._loaded = True
        logger.info(f"Loaded config: {len(self.config.pickers)} pickers from {self.dir}")
        return self.config

    def _load_file(self, path: Path) -> None:
        """Load a single config file and merge it into the namespace."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}", context={"file": str(path)}) from e

        if not isinstance(data, dict):
            raise ConfigError(f"Top level of {path} must be a mapping", context={"file": str(path)})

        try:
            file_config = FallConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid config in {path}: {e}", context={"file": str(path)}) from e

        if "logging" in data:
            self.config.logging = file_config.logging

        for name, picker in file_config.pickers.items():
            if name in self.config.pickers:
                defined_in = next(
                    (f for f, names in self._pickers_by_file.items() if name in names), "?"
                )
                raise ConfigError(
                    f"Picker '{name}' in {path.name} is already defined in {defined_in}",
                    context={"picker": name, "file": str(path)},
                )
            self.config.pickers[name] = picker
            self._pickers_by_file.setdefault(path.name, set()).add(name)

    def get_pickers_in_file(self, filename: str) -> List[str]:
        """Names of the pickers defined in a given file."""
        return sorted(self._pickers_by_file.get(filename, set()))

    def ensure_loaded(self) -> FallConfig:
        if not self._loaded:
            self.load_all()
        return self.config
