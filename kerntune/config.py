"""
Configuration management for kerntune.

Supports:
- TOML config files
- Environment variables
- Command-line overrides
- Sensible defaults

Priority (highest to lowest):
1. Command-line arguments
2. Environment variables
3. Config file
4. Defaults
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List

try:
    import tomllib  # Python 3.11+
except ImportError:
    try:
        import tomli as tomllib  # Fallback for older Python
    except ImportError:
        tomllib = None

from .snapshot.store import DEFAULT_BACKUP_FILE
from .snapshot.dropins import DEFAULT_SYSCTL_DROPIN, DEFAULT_UDEV_RULES


# Default config file locations (searched in order)
CONFIG_SEARCH_PATHS = [
    Path.cwd() / "kerntune.toml",
    Path.home() / ".config" / "kerntune" / "config.toml",
    Path("/etc/kerntune/config.toml"),
]

ENV_SYSFS_ROOT = "KERNTUNE_SYSFS_ROOT"
ENV_BACKUP_FILE = "KERNTUNE_BACKUP_FILE"


@dataclass
class PathsConfig:
    """Filesystem locations."""
    sysfs_root: str = "/"
    backup_file: str = str(DEFAULT_BACKUP_FILE)
    sysctl_dropin: str = str(DEFAULT_SYSCTL_DROPIN)
    udev_rules: str = str(DEFAULT_UDEV_RULES)


@dataclass
class ApplyConfig:
    """Apply behaviour."""
    auto: bool = False


@dataclass
class OutputConfig:
    """Output configuration."""
    verbose: bool = False
    quiet: bool = False
    color: bool = True


@dataclass
class ReloadSettings:
    """Whether save/reset ask the host to reload sysctl and udev."""
    enabled: bool = True
    timeout: int = 30


@dataclass
class Config:
    """Main configuration container."""
    paths: PathsConfig = field(default_factory=PathsConfig)
    apply: ApplyConfig = field(default_factory=ApplyConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    reload: ReloadSettings = field(default_factory=ReloadSettings)

    # Source tracking
    _config_file: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> "Config":
        """
        Load configuration from file and environment.

        Args:
            config_path: Explicit path to config file. If None, searches default locations.
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Config instance with loaded values
        """
        config = cls()

        # Find config file
        if config_path:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
        else:
            path = cls._find_config_file()

        if path:
            config = cls._load_from_file(path)
            config._config_file = path

        config.apply_environment(os.environ if environ is None else environ)
        return config

    @classmethod
    def _find_config_file(cls) -> Optional[Path]:
        """Find config file in default locations."""
        for path in CONFIG_SEARCH_PATHS:
            if path.exists():
                return path
        return None

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load config from TOML file."""
        if tomllib is None:
            raise ImportError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

        with open(path, "rb") as f:
            data = tomllib.load(f)

        return cls._from_dict(data)

    @staticmethod
    def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
        """A top-level table, empty when absent."""
        section = data.get(name, {})
        if not isinstance(section, dict):
            raise ValueError(f"section '{name}' must be a table, not {type(section).__name__}")
        return section

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Config":
        """
        Create Config from dictionary.

        Raises:
            ValueError: If a section is not a table
        """
        config = cls()

        # Paths
        p = cls._section(data, "paths")
        config.paths = PathsConfig(
            sysfs_root=p.get("sysfs_root", config.paths.sysfs_root),
            backup_file=p.get("backup_file", config.paths.backup_file),
            sysctl_dropin=p.get("sysctl_dropin", config.paths.sysctl_dropin),
            udev_rules=p.get("udev_rules", config.paths.udev_rules),
        )

        # Apply
        config.apply = ApplyConfig(
            auto=cls._section(data, "apply").get("auto", config.apply.auto),
        )

        # Output
        out = cls._section(data, "output")
        config.output = OutputConfig(
            verbose=out.get("verbose", config.output.verbose),
            quiet=out.get("quiet", config.output.quiet),
            color=out.get("color", config.output.color),
        )

        # Reload
        rl = cls._section(data, "reload")
        config.reload = ReloadSettings(
            enabled=rl.get("enabled", config.reload.enabled),
            timeout=rl.get("timeout", config.reload.timeout),
        )

        return config

    def apply_environment(self, environ: Dict[str, str]) -> "Config":
        """Override paths from KERNTUNE_* environment variables."""
        if environ.get(ENV_SYSFS_ROOT):
            self.paths.sysfs_root = environ[ENV_SYSFS_ROOT]
        if environ.get(ENV_BACKUP_FILE):
            self.paths.backup_file = environ[ENV_BACKUP_FILE]
        return self

    def override_from_args(self, args) -> "Config":
        """
        Override config values from argparse namespace.

        Args with value None are ignored (keeping config file values).
        """
        if getattr(args, "sysfs_root", None):
            self.paths.sysfs_root = args.sysfs_root
        if getattr(args, "backup_file", None):
            self.paths.backup_file = args.backup_file

        if getattr(args, "auto", None):
            self.apply.auto = True

        if getattr(args, "verbose", None):
            self.output.verbose = True
        if getattr(args, "quiet", None):
            self.output.quiet = True
            self.output.verbose = False
        if getattr(args, "no_color", None):
            self.output.color = False

        if getattr(args, "no_reload", None):
            self.reload.enabled = False

        return self

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not Path(self.paths.sysfs_root).is_dir():
            errors.append(f"sysfs root is not a directory: {self.paths.sysfs_root}")

        for name in ("backup_file", "sysctl_dropin", "udev_rules"):
            value = getattr(self.paths, name)
            if not value:
                errors.append(f"paths.{name} must not be empty")
            elif Path(value).is_dir():
                errors.append(f"paths.{name} points to a directory: {value}")

        if self.reload.timeout < 1:
            errors.append("Reload timeout must be at least 1 second")

        return errors

    def summary(self, include_config_path: bool = True) -> str:
        """Generate human-readable config summary."""
        lines = []

        if include_config_path:
            if self._config_file:
                lines.append(f"Config: {self._config_file}")
            else:
                lines.append("Config: (defaults)")

        lines.append(f"Sysfs root: {self.paths.sysfs_root}")
        lines.append(f"Backup: {self.paths.backup_file}")
        lines.append(f"Drop-ins: {self.paths.sysctl_dropin}, {self.paths.udev_rules}")
        lines.append(f"Reload: {'on' if self.reload.enabled else 'off'}")

        return "\n".join(lines)
