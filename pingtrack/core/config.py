"""
Configuration management for PingTrack.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import toml


DEFAULT_TARGET_URL = "https://www.google.com/generate_204"


@dataclass
class ProbeConfig:
    """Probe configuration settings."""
    mode: str = "direct"
    target_url: str = DEFAULT_TARGET_URL
    endpoint_url: str = "http://127.0.0.1:8080/ping"
    timeout: float = 5.0


@dataclass
class TrackingConfig:
    """Sampling configuration settings."""
    interval_ms: int = 3000
    threshold_ms: int = 150


@dataclass
class AlertConfig:
    """Alert sound configuration settings."""
    enabled: bool = True
    sound_file: str = ""
    tone_frequency: int = 880
    tone_duration: float = 0.3
    sample_rate: int = 44100
    volume: float = 0.5


@dataclass
class StorageConfig:
    """Session log storage settings."""
    directory: str = "~/.pingtrack/logs"

    @property
    def path(self) -> Path:
        return Path(self.directory).expanduser()


@dataclass
class ServerConfig:
    """Ping endpoint settings."""
    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    file: str = ""
    max_size: int = 10
    backup_count: int = 3


def _section(cls, data: Dict[str, Any], name: str):
    values = data.get(name, {})
    if not isinstance(values, dict):
        raise ValueError(f"Configuration section [{name}] must be a table")
    known = set(cls.__dataclass_fields__)
    unknown = set(values) - known
    if unknown:
        raise ValueError(f"Unknown keys in [{name}]: {', '.join(sorted(unknown))}")
    return cls(**values)


@dataclass
class Config:
    """Main configuration class."""
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    alert: AlertConfig = field(default_factory=AlertConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def default(cls) -> 'Config':
        """Configuration with built-in values only."""
        return cls()

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> 'Config':
        """Build configuration from already parsed TOML data."""
        return cls(
            probe=_section(ProbeConfig, config_data, 'probe'),
            tracking=_section(TrackingConfig, config_data, 'tracking'),
            alert=_section(AlertConfig, config_data, 'alert'),
            storage=_section(StorageConfig, config_data, 'storage'),
            server=_section(ServerConfig, config_data, 'server'),
            logging=_section(LoggingConfig, config_data, 'logging'),
        )

    @classmethod
    def from_file(cls, config_path: Path) -> 'Config':
        """Load configuration from TOML file."""
        try:
            config_data = toml.load(config_path)
        except (OSError, toml.TomlDecodeError) as e:
            raise ValueError(f"Failed to load configuration: {e}")

        try:
            return cls.from_dict(config_data)
        except TypeError as e:
            raise ValueError(f"Invalid configuration: {e}")

    @classmethod
    def load(cls, config_path: Optional[Path]) -> 'Config':
        """Load from ``config_path`` when it exists, otherwise use defaults."""
        if config_path is not None and Path(config_path).exists():
            return cls.from_file(Path(config_path))
        return cls.default()

    def validate(self) -> bool:
        """Validate configuration values."""
        if self.probe.mode not in ('direct', 'endpoint'):
            raise ValueError(f"Unknown probe mode: {self.probe.mode}")

        if self.probe.timeout <= 0:
            raise ValueError("Probe timeout must be positive")

        if self.tracking.interval_ms <= 0:
            raise ValueError("Sampling interval must be positive")

        if self.tracking.threshold_ms < 0:
            raise ValueError("Alert threshold must not be negative")

        if not 0.0 <= self.alert.volume <= 1.0:
            raise ValueError("Alert volume must be between 0 and 1")

        if self.alert.tone_duration <= 0 or self.alert.sample_rate <= 0:
            raise ValueError("Alert tone duration and sample rate must be positive")

        if not 0 < self.server.port < 65536:
            raise ValueError("Server port must be between 1 and 65535")

        return True
