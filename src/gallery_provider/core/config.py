"""
Configuration for the gallery provider.

Values come from defaults.yaml, then an optional YAML or JSON file, then
GALLERY_* environment variables.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

_DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

_LOADERS = {".yaml": yaml.safe_load, ".yml": yaml.safe_load, ".json": json.loads}

_defaults: dict[str, Any] | None = None


def _read_defaults() -> dict[str, Any]:
    """Parse defaults.yaml once; a missing or broken file yields no defaults."""
    global _defaults
    if _defaults is None:
        try:
            _defaults = yaml.safe_load(_DEFAULTS_PATH.read_text(encoding="utf-8")) or {}
        except FileNotFoundError:
            logger.warning(f"Defaults file missing: {_DEFAULTS_PATH}")
            _defaults = {}
        except yaml.YAMLError as e:
            logger.error(f"Cannot parse {_DEFAULTS_PATH}: {e}")
            _defaults = {}
    return _defaults


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    return _read_defaults().get(section, {}).get(key, fallback)


@dataclass
class DatabaseConfig:
    """Location of the SQLite file backing the provider."""

    path: str = field(default_factory=lambda: _get_default("database", "path", ".gallery"))
    name: str = field(
        default_factory=lambda: _get_default("database", "name", "gallery_source.db")
    )

    @property
    def db_path(self) -> Path:
        """Full path of the database file."""
        if self.name == ":memory:":
            return Path(self.name)
        return Path(self.path).expanduser() / self.name


@dataclass
class ProviderConfig:
    """Configuration for URI dispatch."""

    authority: str = field(
        default_factory=lambda: _get_default(
            "provider", "authority", "com.google.android.apps.muzei.gallery"
        )
    )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "INFO"))
    format: str = field(
        default_factory=lambda: _get_default(
            "logging", "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )


@dataclass
class GalleryConfig:
    """Main configuration class for the gallery provider."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "GalleryConfig":
        """
        Read a ``.yaml``/``.yml`` or ``.json`` file.

        Sections missing from the file keep their defaults.

        Raises:
            FileNotFoundError: The file does not exist
            ValueError: The suffix is not a supported format
        """
        path = Path(path)
        if path.suffix not in _LOADERS:
            raise ValueError(f"Unsupported config file format: {path.suffix}")
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")
        data = _LOADERS[path.suffix](content) if content.strip() else {}
        return cls(
            database=DatabaseConfig(**data.get("database", {})),
            provider=ProviderConfig(**data.get("provider", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    def apply_env_overrides(self) -> "GalleryConfig":
        """Overwrite fields named by ``GALLERY_<SECTION>_<KEY>`` variables that are set."""
        for section, config in self._sections().items():
            for key in asdict(config):
                value = os.environ.get(f"GALLERY_{section}_{key}".upper())
                if value is not None:
                    setattr(config, key, value)
        return self

    def _sections(self) -> dict[str, Any]:
        return {"database": self.database, "provider": self.provider, "logging": self.logging}

    def to_dict(self) -> dict:
        return asdict(self)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def save(self, path: Path | str) -> None:
        """Write the configuration as YAML, creating parent directories."""
        path = Path(path)
        if path.suffix not in (".yaml", ".yml"):
            raise ValueError(f"Configuration can only be saved as YAML, not {path.suffix}")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_yaml(), encoding="utf-8")


def configure_logging(config: LoggingConfig) -> None:
    """Install a root stream handler using the configured level and format."""
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        logger.warning(f"Unknown log level {config.level!r}, using INFO")
        level = logging.INFO
    logging.basicConfig(level=level, format=config.format)
    logging.getLogger("gallery_provider").setLevel(level)


def load_config(config_path: Optional[Path | str] = None, apply_env: bool = True) -> GalleryConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to apply environment variable overrides.

    Returns:
        GalleryConfig instance
    """
    if config_path:
        config = GalleryConfig.from_file(config_path)
    else:
        config = GalleryConfig()

    if apply_env:
        config.apply_env_overrides()

    return config
