"""YAML config loader — reads audit-config.yml into AuditConfig."""

from pathlib import Path

import yaml

from pai.schemas.config import AuditConfig


def load_config(path: str | Path) -> AuditConfig:
    """Load and validate an audit config file.

    Raises ``FileNotFoundError`` if the path doesn't exist and
    ``pydantic.ValidationError`` if the YAML content is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    # A key with only commented-out items loads as None; normalize to empty list.
    if "disabled_checks" in raw:
        if raw["disabled_checks"] is None:
            raw["disabled_checks"] = []
        elif isinstance(raw["disabled_checks"], list):
            raw["disabled_checks"] = [item for item in raw["disabled_checks"] if item]

    return AuditConfig(**raw)
