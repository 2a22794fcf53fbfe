"""
Application configuration stored as YAML.

The configuration is loaded once by the caller and handed to the collaborators
that need it; the analysis kernel never reads it.
"""

import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "powert.yaml"


@dataclass(slots=True)
class DecayLoadingConfig:
    """How a−b and b signal files are located and scaled inside a data folder."""

    a_minus_b_format: str = "<BASENAME>-a-b.csv"
    b_format: str = "<BASENAME>-b.csv"
    time_scaling: float = 1e6
    signal_scaling: float = 1e6
    # time origin is searched in this leading fraction of the b signal
    time_origin_window: float = 0.25

    def __post_init__(self) -> None:
        # PyYAML reads exponents without a dot (1e6) as strings
        self.time_scaling = float(self.time_scaling)
        self.signal_scaling = float(self.signal_scaling)
        self.time_origin_window = float(self.time_origin_window)


@dataclass(slots=True)
class WorkspaceConfig:
    clear_before_load: bool = True
    sync_alpha: bool = True
    sync_tau_t: bool = True


@dataclass(slots=True)
class AppConfig:
    decay_loading: DecayLoadingConfig = field(default_factory=DecayLoadingConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "AppConfig":
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("Configuration root must be a mapping")
        return cls(
            decay_loading=_section(DecayLoadingConfig, data.get("decay_loading")),
            workspace=_section(WorkspaceConfig, data.get("workspace")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _section(section_cls, raw: Any):
    if raw is None:
        return section_cls()
    if not isinstance(raw, dict):
        raise ValueError(f"Section for {section_cls.__name__} must be a mapping")
    known = {f.name for f in fields(section_cls)}
    unknown = set(raw) - known
    if unknown:
        logger.warning(
            "Ignoring unknown %s keys: %s", section_cls.__name__, ", ".join(sorted(unknown))
        )
    return section_cls(**{k: v for k, v in raw.items() if k in known})


def load_config(file_path: Path | str | None = None) -> AppConfig:
    """Load the configuration; a missing file gives the defaults."""
    path = Path(file_path) if file_path is not None else Path.cwd() / CONFIG_FILENAME
    if not path.exists():
        return AppConfig()
    try:
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to load YAML file {path}: {e}") from e
    config = AppConfig.from_dict(yaml_data)
    logger.debug("Loaded configuration from %s", path)
    return config


def save_config(config: AppConfig, file_path: Path | str | None = None) -> Path:
    path = Path(file_path) if file_path is not None else Path.cwd() / CONFIG_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_dict(), f, sort_keys=False, allow_unicode=True)
    return path
