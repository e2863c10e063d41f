from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


@dataclass(frozen=True)
class SiteConfig:
    """Read-only site configuration consulted by field resolvers.

    ``mapping`` maps a field selector (``"Type.field"`` or
    ``"<node path>.field"``) to the node type the field links to.
    """

    mapping: Dict[str, str] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    def mapped_type(self, *selectors: Optional[str]) -> Optional[str]:
        """Return the target type of the first selector present in ``mapping``."""
        for selector in selectors:
            if selector and selector in self.mapping:
                return self.mapping[selector]
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SiteConfig":
        mapping = data.get("mapping") or {}
        if not isinstance(mapping, dict):
            raise ValueError("Site config 'mapping' must be a mapping of selector to type")
        return cls(
            mapping={str(k): str(v) for k, v in mapping.items()},
            extra={k: v for k, v in data.items() if k != "mapping"},
        )

    @classmethod
    def from_yaml(cls, config_file: Path) -> "SiteConfig":
        """Load the site config from a YAML file."""
        if not config_file.exists():
            raise FileNotFoundError(f"Site config file not found: {config_file}")
        try:
            with config_file.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ValueError(f"Failed to read site config {config_file}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Site config {config_file} must be a mapping")
        return cls.from_dict(data)
