"""
Configuration Loader (``procurement_config.loader``).

Responsibility
--------------
Loads a purchasing YAML file and parses it into a typed
``PurchasingConfig``.  Services should not call this directly; the
single public entry point for runtime config is
``procurement_config.get_active_config()``.

Invariants enforced
-------------------
* All parse errors raise ``ValueError`` or ``KeyError`` with
  descriptive messages; unknown keys are never silently ignored.
* Every parsed object is a frozen dataclass from ``schema.py``.
* ``compute_checksum`` produces a deterministic SHA-256 hash of the
  parsed values for configuration identity in trace logs.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Top-level document that is not a mapping  -> ``ValueError``.
* Unknown keys under ``purchasing``  -> ``KeyError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

import yaml

from procurement_config.schema import PurchasingConfig

SECTION = "purchasing"


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Preconditions:
        - ``path`` must point to an existing, readable YAML file.
    Postconditions:
        - Returns a ``dict`` (possibly empty if the YAML is empty).
    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top of {path}, got {type(data).__name__}")
    return data


def parse_purchasing_config(data: dict[str, Any]) -> PurchasingConfig:
    """
    Parse a ``PurchasingConfig`` from a loaded YAML document.

    Settings live under a ``purchasing`` section; a missing section
    yields the defaults.

    Raises:
        ValueError: if the section is not a mapping or a value is invalid.
        KeyError: if the section contains unknown keys.
    """
    section = data.get(SECTION) or {}
    if not isinstance(section, dict):
        raise ValueError(f"'{SECTION}' section must be a mapping, got {type(section).__name__}")
    return PurchasingConfig.from_dict(section)


def load_purchasing_config(path: Path) -> PurchasingConfig:
    """Load and parse a purchasing configuration file."""
    return parse_purchasing_config(load_yaml_file(path))


def compute_checksum(config: PurchasingConfig) -> str:
    """Deterministic SHA-256 of a config's values."""
    payload = json.dumps(asdict(config), sort_keys=True, default=str)
    return hashlib.sha256(payload.encode()).hexdigest()
