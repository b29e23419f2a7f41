"""
Asset Inventory Configuration Schema.

Defines the structure and defaults for asset code allocation and
depreciation settings.  Actual values are loaded from a YAML file or a
dict at runtime.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Self

import yaml

from inventory_kernel.exceptions import InvalidArgumentError
from inventory_kernel.logging_config import get_logger
from inventory_modules.assets.models import DEFAULT_PROCUREMENT_CODES

logger = get_logger("modules.assets.config")

SEQUENCE_SCOPES = ("scope", "global")
BULK_CODE_STYLES = ("sequence", "suffix")


@dataclass
class InventoryConfig:
    """
    Configuration schema for the asset inventory module.

    Field defaults reproduce the established code format
    ``001.10.1.24.001``.  Override at instantiation:

        config = InventoryConfig(
            sequence_width=4,
            bulk_code_style="suffix",
        )
    """

    # Code layout
    sequence_width: int = 3
    bulk_suffix_width: int = 3
    location_code_width: int = 3
    category_code_width: int = 2

    # Segment fallbacks when reference data carries no code
    default_location_code: str = "001"
    default_category_code: str = "10"
    default_source_code: str = "1"
    procurement_codes: dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_PROCUREMENT_CODES)
    )

    # Allocation
    sequence_scope: str = "scope"  # "scope" (loc+cat+src+year) or "global"
    bulk_code_style: str = "sequence"  # "sequence" or "suffix"
    max_allocation_retries: int = 3

    # Validation
    allow_future_acquisition: bool = False

    def __post_init__(self):
        for name in (
            "sequence_width",
            "bulk_suffix_width",
            "location_code_width",
            "category_code_width",
            "max_allocation_retries",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidArgumentError(name, value, "must be a positive integer")
        if self.sequence_scope not in SEQUENCE_SCOPES:
            raise InvalidArgumentError(
                "sequence_scope", self.sequence_scope, f"must be one of {SEQUENCE_SCOPES}",
            )
        if self.bulk_code_style not in BULK_CODE_STYLES:
            raise InvalidArgumentError(
                "bulk_code_style", self.bulk_code_style, f"must be one of {BULK_CODE_STYLES}",
            )
        for name in ("default_location_code", "default_category_code", "default_source_code"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value or "." in value:
                raise InvalidArgumentError(name, value, "must be a non-empty code without '.'")

        logger.info(
            "inventory_config_initialized",
            extra={
                "sequence_width": self.sequence_width,
                "sequence_scope": self.sequence_scope,
                "bulk_code_style": self.bulk_code_style,
                "max_allocation_retries": self.max_allocation_retries,
            },
        )

    def resolve_source_code(self, procurement_source: str | None) -> str:
        """Code segment for a procurement source; unknown sources use the default."""
        if procurement_source is None:
            return self.default_source_code
        return self.procurement_codes.get(
            procurement_source.strip(), self.default_source_code,
        )

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the standard code format."""
        logger.info("inventory_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary (e.g., loaded from database/file)."""
        logger.info(
            "inventory_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidArgumentError("config", unknown, "unknown configuration keys")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """
        Load config from a YAML file.

        The file holds a mapping of field names, optionally nested under an
        ``inventory`` key.  An empty file yields the defaults.
        """
        with Path(path).open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise InvalidArgumentError("path", str(path), "YAML root must be a mapping")
        if "inventory" in data and isinstance(data["inventory"], dict):
            data = data["inventory"]
        logger.info("inventory_config_loading_from_yaml", extra={"path": str(path)})
        return cls.from_dict(data)
