"""
Configuration loader for the Spreader Detector.
Loads YAML config and provides typed access to settings.
"""
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from spreader_detector.common.errors import ConfigError


def get_package_root() -> Path:
    """Get the package directory."""
    return Path(__file__).parent


def get_default_config_path() -> Path:
    """Path of the configuration file shipped with the package."""
    return get_package_root() / "resources" / "config_default.yaml"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_yaml(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {config_path}: {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Config root must be a mapping: {config_path}")
    return config


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    The packaged defaults are always loaded first; a user file, when given,
    is merged over them so it only needs the keys it changes.

    Args:
        config_path: Path to an overriding config file.

    Returns:
        Dictionary containing all configuration settings
    """
    config = _read_yaml(get_default_config_path())
    if config_path is not None:
        config = _deep_merge(config, _read_yaml(Path(config_path)))
    return config


def _require(cfg: Dict[str, Any], dotted_key: str) -> Any:
    node: Any = cfg
    for part in dotted_key.split('.'):
        if not isinstance(node, dict) or part not in node:
            raise ConfigError(f"Missing {dotted_key} in config.")
        node = node[part]
    return node


def _require_float(cfg: Dict[str, Any], dotted_key: str) -> float:
    value = _require(cfg, dotted_key)
    if isinstance(value, bool):
        raise ConfigError(f"{dotted_key} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{dotted_key} must be a number, got {value!r}") from e


@dataclass(frozen=True)
class DetectorParams:
    """Typed view over the configuration values the pipeline needs."""
    reference_distance: float = 1.0    # MIN_DISTANCE (meters)
    reference_time: float = 20.0       # MAX_TIME (minutes)
    hospitalization_threshold: float = 0.3
    quarantine_threshold: float = 0.1
    medical_supervision_msg: str = "{name} {id}\nMedical supervision required.\n"
    regular_quarantine_msg: str = "{name} {id}\nQuarantine required.\n"
    clean_msg: str = "{name} {id}\nClean.\n"
    output_file: str = "SpreaderDetectorAnalysis.out"
    max_line_length: int = 1024

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> 'DetectorParams':
        max_line_length = _require(cfg, 'io.max_line_length')
        if isinstance(max_line_length, bool) or not isinstance(max_line_length, int) \
                or max_line_length <= 0:
            raise ConfigError(
                f"io.max_line_length must be a positive integer, got {max_line_length!r}"
            )

        messages = {}
        for key in ('medical_supervision', 'regular_quarantine', 'clean'):
            template = _require(cfg, f'triage.messages.{key}')
            if not isinstance(template, str):
                raise ConfigError(f"triage.messages.{key} must be a string")
            try:
                template.format(name='', id=0)
            except (KeyError, IndexError, ValueError) as e:
                raise ConfigError(
                    f"triage.messages.{key} may only use {{name}} and {{id}}: {e}"
                ) from e
            messages[key] = template

        return cls(
            reference_distance=_require_float(cfg, 'propagation.reference_distance'),
            reference_time=_require_float(cfg, 'propagation.reference_time'),
            hospitalization_threshold=_require_float(cfg, 'triage.hospitalization_threshold'),
            quarantine_threshold=_require_float(cfg, 'triage.quarantine_threshold'),
            medical_supervision_msg=messages['medical_supervision'],
            regular_quarantine_msg=messages['regular_quarantine'],
            clean_msg=messages['clean'],
            output_file=str(_require(cfg, 'io.output_file')),
            max_line_length=max_line_length,
        )


def load_params(config_path: Optional[str] = None) -> DetectorParams:
    """Load config (defaults plus optional override) into DetectorParams."""
    return DetectorParams.from_config(load_config(config_path))
