"""Engine configuration: layout profile + environment overrides.

The profile dict (see ``profiles``) is the single source of keyword lists,
thresholds and output shape. A JSON file named by ``BGMI_STATS_PROFILE`` can
override any top-level profile key.
"""

import json
import logging
import os
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .exceptions import ConfigError
from .profiles import PROFILES

logger = logging.getLogger(__name__)

PROFILE_PATH_ENV = "BGMI_STATS_PROFILE"
CANDIDATE_THRESHOLD_ENV = "BGMI_STATS_CANDIDATE_THRESHOLD"
ASSIGN_THRESHOLD_ENV = "BGMI_STATS_ASSIGN_THRESHOLD"
LOG_LEVEL_ENV = "BGMI_STATS_LOG_LEVEL"

# hard bounds of the slot / rank labels printed on the screens
ID_MIN = 1
ID_MAX = 60
ROSTER_MAX = 6


class Thresholds(BaseModel):
    candidate: float = Field(0.65, ge=0.0, le=1.0)
    assign: float = Field(0.60, ge=0.0, le=1.0)


class EngineConfig(BaseModel):
    keywords: Dict[str, List[str]] = {
        "elimination": ["eliminat"],
        "finish": ["finish"],
        "remaining": ["remaining"],
    }
    # anchored to whole UI lines so player names containing these words survive
    lobby_noise: List[str] = [r"^\d*\s*remaining\b", r"^team\s+\d+$", r"^stage\b", r"^match\s+start"]
    result_noise: List[str] = [r"continue", r"^stage"]
    boundary_marker: str = "---IMAGE BREAK---"
    thresholds: Thresholds = Thresholds()
    similarity_metric: str = "dice"
    fold_confusables: bool = True
    rows_per_slot: int = Field(6, ge=1)
    max_roster: int = Field(ROSTER_MAX, ge=1, le=ROSTER_MAX)
    id_range: Tuple[int, int] = (ID_MIN, ID_MAX)
    max_bare_name_length: int = Field(32, ge=2)
    empty_sentinel: str = '""'
    reset_state_on_boundary: bool = False

    @field_validator("similarity_metric")
    @classmethod
    def _known_metric(cls, v):
        if v not in ("dice", "levenshtein"):
            raise ValueError("similarity_metric must be 'dice' or 'levenshtein'")
        return v

    @field_validator("boundary_marker")
    @classmethod
    def _marker_not_blank(cls, v):
        if not v.strip():
            raise ValueError("boundary_marker must be a non-empty string")
        return v.strip()

    @model_validator(mode="after")
    def _id_range_in_bounds(self):
        lo, hi = self.id_range
        if not (ID_MIN <= lo <= hi <= ID_MAX):
            raise ValueError(f"id_range must lie within {ID_MIN}-{ID_MAX}")
        return self

    @property
    def boundary_separator(self) -> str:
        # what goes between two concatenated per-image texts
        return f"\n\n{self.boundary_marker}\n\n"

    def in_range(self, n: int) -> bool:
        return self.id_range[0] <= n <= self.id_range[1]


def _load_override_file(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(PROFILE_PATH_ENV, f"cannot load {path}: {e}")
    if not isinstance(data, dict):
        raise ConfigError(PROFILE_PATH_ENV, f"{path} must hold a JSON object")
    return data


def _float_env(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(name, f"'{raw}' is not a number")


def log_level(default: str = "INFO") -> str:
    # an unknown level name falls back to the default instead of failing the import
    raw = (os.getenv(LOG_LEVEL_ENV) or default).strip().upper()
    if not isinstance(logging.getLevelName(raw), int):
        logger.warning(f"Unknown {LOG_LEVEL_ENV} '{raw}', using {default}")
        return default
    return raw


def load_config(version: str = "v1", overrides: Optional[dict] = None) -> EngineConfig:
    """Build the engine config from a profile, an optional JSON file and env vars.

    Precedence (lowest to highest): profile ``version``, file named by
    ``BGMI_STATS_PROFILE``, explicit *overrides*, threshold env vars.

    Raises:
        ConfigError: unknown profile, unreadable override file or invalid values.
    """
    if version not in PROFILES:
        raise ConfigError("version", f"unknown profile '{version}'")
    data = PROFILES[version](version)

    path = os.getenv(PROFILE_PATH_ENV)
    if path:
        data.update(_load_override_file(path))
        logger.info(f"Loaded profile overrides from {path}")
    if overrides:
        data.update(overrides)

    thresholds = dict(data.get("thresholds") or {})
    candidate = _float_env(CANDIDATE_THRESHOLD_ENV)
    assign = _float_env(ASSIGN_THRESHOLD_ENV)
    if candidate is not None:
        thresholds["candidate"] = candidate
    if assign is not None:
        thresholds["assign"] = assign
    data["thresholds"] = thresholds

    try:
        return EngineConfig(**data)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(p) for p in first.get("loc", ())) or "profile"
        raise ConfigError(key, first.get("msg", str(e)))


DEFAULT_CONFIG = EngineConfig()
