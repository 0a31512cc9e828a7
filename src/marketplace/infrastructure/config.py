"""Runtime settings, read from ``MARKETPLACE_*`` environment variables.

Business constants (tax rate, shipping fees) are domain rules and live
in ``marketplace.domain.model.order``, not here.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}
LOG_FORMATS = ("console", "json")


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path("data")
    log_level: str = "WARNING"
    log_format: str = "console"
    strict_transitions: bool = True

    def __post_init__(self) -> None:
        if self.log_format not in LOG_FORMATS:
            raise ValueError(
                f"log_format must be one of {', '.join(LOG_FORMATS)}, got {self.log_format!r}"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        defaults = cls()
        strict = env.get("MARKETPLACE_STRICT_TRANSITIONS")
        return cls(
            data_dir=Path(env.get("MARKETPLACE_DATA_DIR", str(defaults.data_dir))),
            log_level=env.get("MARKETPLACE_LOG_LEVEL", defaults.log_level).upper(),
            log_format=env.get("MARKETPLACE_LOG_FORMAT", defaults.log_format).lower(),
            strict_transitions=(
                defaults.strict_transitions
                if strict is None
                else _parse_bool("MARKETPLACE_STRICT_TRANSITIONS", strict)
            ),
        )

    def with_overrides(self, **changes) -> Settings:
        """Return a copy with the non-None *changes* applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
