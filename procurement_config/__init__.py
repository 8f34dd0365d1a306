"""
procurement_config -- single public entrypoint for purchasing configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  Services receive a ``PurchasingConfig``
    and never read YAML files themselves.

Architecture position:
    Configuration -- sits above ``procurement_kernel`` and below
    ``procurement_services``.  Engines MUST NEVER import from
    ``procurement_config``; services pass the relevant values in as
    explicit arguments.

Failure modes:
    - ``FileNotFoundError`` -- the requested file does not exist.
    - ``ValueError`` / ``KeyError`` -- schema validation failures.
    - ``yaml.YAMLError`` -- malformed YAML.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``PROCUREMENT_CONFIG_TRACE`` log entry with the source path, checksum
    and effective values, tying each scheduling decision to the
    configuration that governed it.
"""

from __future__ import annotations

from pathlib import Path

from procurement_config.loader import compute_checksum, load_purchasing_config
from procurement_config.schema import PurchasingConfig
from procurement_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(path: Path | str | None = None) -> PurchasingConfig:
    """The ONLY public configuration entrypoint.

    Args:
        path: YAML file to load.  Defaults to the packaged
            ``defaults.yaml``.

    Returns:
        A validated, frozen ``PurchasingConfig``.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If a value fails validation.
        KeyError: If the file carries unknown keys.
    """
    source = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    config = load_purchasing_config(source)

    _logger.info(
        "PROCUREMENT_CONFIG_TRACE",
        extra={
            "trace_type": "PROCUREMENT_CONFIG_TRACE",
            "source": str(source),
            "checksum": compute_checksum(config),
            "domestic_currency": config.domestic_currency,
            "min_days_advance": config.min_days_advance,
            "divergence_tolerance": str(config.divergence_tolerance),
            "contract_expiry_warning_days": config.contract_expiry_warning_days,
        },
    )
    return config


__all__ = [
    "DEFAULT_CONFIG_PATH",
    "PurchasingConfig",
    "get_active_config",
]
