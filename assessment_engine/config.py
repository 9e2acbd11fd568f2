"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      : committed static defaults
  2. ``config/local.toml``        : optional local overrides (gitignored)
  3. ``.env``                     : local secrets and env overrides (gitignored)
  4. Environment variables        : ``ASSESSMENT_ENGINE_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The scoring, recommendation and report engines receive their config
sections at construction time, so each engine is a pure function of
(input, config).  Numeric tunables never live as module constants.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

_DIFFICULTY_KEYS = frozenset({"easy", "medium", "hard"})

# ── Sub-config models ─────────────────────────────────────────────────────────


class CompositeWeights(BaseModel):
    """Convex weights blending the three component scores."""

    model_config = ConfigDict(frozen=True)

    percentage: float = 0.7
    speed: float = 0.2
    consistency: float = 0.1

    @model_validator(mode="after")
    def validate_convex(self) -> "CompositeWeights":
        weights = (self.percentage, self.speed, self.consistency)
        if any(w < 0 for w in weights):
            raise ValueError(f"Composite weights must be non-negative, got {weights}.")
        if abs(sum(weights) - 1.0) > 1e-6:
            raise ValueError(f"Composite weights must sum to 1.0, got {sum(weights):.6f}.")
        return self


class ScoringConfig(BaseModel):
    """Scoring engine tunables: category thresholds, weights, timing table."""

    model_config = ConfigDict(frozen=True)

    innovator_threshold: float = 80.0
    explorer_threshold: float = 50.0
    weights: CompositeWeights = CompositeWeights()
    expected_response_ms: dict[str, dict[str, int]] = {
        "5-10":  {"easy": 15000, "medium": 25000, "hard": 35000},
        "10-15": {"easy": 12000, "medium": 20000, "hard": 30000},
        "15-18": {"easy": 10000, "medium": 18000, "hard": 25000},
    }
    default_age_group: str = "10-15"
    speed_floor_ratio: float = 0.3    # actual time floored at 30% of expected
    speed_ratio_cap: float = 2.0
    strength_threshold: float = 70.0
    opportunity_threshold: float = 60.0
    max_skill_entries: int = 3
    opportunity_lessons_per_skill: int = 3

    @model_validator(mode="after")
    def validate_scoring(self) -> "ScoringConfig":
        if not 0.0 <= self.explorer_threshold < self.innovator_threshold <= 100.0:
            raise ValueError(
                "Category thresholds must satisfy 0 <= explorer < innovator <= 100, "
                f"got explorer={self.explorer_threshold}, innovator={self.innovator_threshold}."
            )
        for age_group, row in self.expected_response_ms.items():
            missing = _DIFFICULTY_KEYS - set(row)
            if missing:
                raise ValueError(
                    f"expected_response_ms[{age_group!r}] is missing {sorted(missing)}."
                )
            if any(ms <= 0 for ms in row.values()):
                raise ValueError(f"expected_response_ms[{age_group!r}] must be positive.")
        if self.default_age_group not in self.expected_response_ms:
            raise ValueError(
                f"default_age_group {self.default_age_group!r} has no expected_response_ms row."
            )
        if not 0.0 < self.speed_floor_ratio <= 1.0:
            raise ValueError(f"speed_floor_ratio must be in (0, 1], got {self.speed_floor_ratio}.")
        if not 1 <= self.max_skill_entries <= 3:
            raise ValueError(f"max_skill_entries must be in [1, 3], got {self.max_skill_entries}.")
        return self


class PerformanceTier(BaseModel):
    """One mutually-exclusive performance bonus tier."""

    model_config = ConfigDict(frozen=True)

    min_percentage: float
    bonus_xp: int
    badge: str


class RewardsConfig(BaseModel):
    """Gamification tunables.

    ``max_xp_per_submission = None`` keeps bonuses stacking without a cap.
    """

    model_config = ConfigDict(frozen=True)

    xp_per_correct: int = 10
    performance_tiers: list[PerformanceTier] = [
        PerformanceTier(min_percentage=90, bonus_xp=100, badge="Perfectionist"),
        PerformanceTier(min_percentage=80, bonus_xp=50, badge="High Achiever"),
        PerformanceTier(min_percentage=60, bonus_xp=25, badge="Steady Learner"),
    ]
    first_completion_badge: str = "Quiz Starter"
    speed_badge: str = "Speed Demon"
    speed_badge_threshold_ms: int = 10000
    speed_bonus_xp: int = 30
    mastery_threshold: float = 90.0
    mastery_bonus_xp: int = 20
    max_xp_per_submission: Optional[int] = None

    @field_validator("performance_tiers")
    @classmethod
    def sort_tiers(cls, v: list[PerformanceTier]) -> list[PerformanceTier]:
        # Highest tier first so the first match wins.
        return sorted(v, key=lambda t: -t.min_percentage)

    @field_validator("max_xp_per_submission")
    @classmethod
    def validate_cap(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError(f"max_xp_per_submission must be >= 0, got {v}.")
        return v


class RecommendationConfig(BaseModel):
    """Lesson ranking and sequencing tunables."""

    model_config = ConfigDict(frozen=True)

    ideal_duration_minutes: dict[str, int] = {"5-10": 15, "10-15": 20, "15-18": 25}
    format_preferences: dict[str, dict[str, float]] = {
        "5-10":  {"game": 20, "interactive": 18, "video": 15, "text": 5},
        "10-15": {"interactive": 20, "game": 18, "video": 15, "text": 10},
        "15-18": {"interactive": 18, "video": 17, "text": 15, "game": 12},
    }
    default_age_group: str = "10-15"
    default_format_score: float = 10.0
    neutral_difficulty_score: float = 15.0
    category_difficulty: dict[str, str] = {
        "Builder": "easy",
        "Explorer": "medium",
        "Innovator": "hard",
    }
    default_max_results: int = 8
    high_priority_score: float = 80.0
    low_priority_score: float = 50.0
    default_sequence_length: int = 5
    lessons_per_difficulty_step: int = 2

    @model_validator(mode="after")
    def validate_recommendation(self) -> "RecommendationConfig":
        if self.default_age_group not in self.ideal_duration_minutes:
            raise ValueError(
                f"default_age_group {self.default_age_group!r} has no ideal duration."
            )
        if self.low_priority_score > self.high_priority_score:
            raise ValueError("low_priority_score must be <= high_priority_score.")
        bad = {d for d in self.category_difficulty.values() if d not in _DIFFICULTY_KEYS}
        if bad:
            raise ValueError(f"category_difficulty has unknown difficulties {sorted(bad)}.")
        if self.lessons_per_difficulty_step < 1:
            raise ValueError("lessons_per_difficulty_step must be >= 1.")
        if not 1 <= self.default_max_results <= 20:
            raise ValueError(
                f"default_max_results must be in [1, 20], got {self.default_max_results}."
            )
        return self


class VisualAssetsConfig(BaseModel):
    """Animation asset URLs attached to every report."""

    model_config = ConfigDict(frozen=True)

    confetti: str = "https://assets9.lottiefiles.com/packages/lf20_obhph3sh.json"
    brain_gauge: str = "https://assets9.lottiefiles.com/packages/lf20_dmw2lkzr.json"
    category_animations: dict[str, str] = {
        "Builder": "https://assets9.lottiefiles.com/packages/lf20_builder.json",
        "Explorer": "https://assets9.lottiefiles.com/packages/lf20_explorer.json",
        "Innovator": "https://assets9.lottiefiles.com/packages/lf20_innovator.json",
    }


class ReportConfig(BaseModel):
    """Certificate eligibility and report metadata settings."""

    model_config = ConfigDict(frozen=True)

    mastery_threshold: float = 90.0
    achievement_threshold: float = 80.0
    completion_threshold: float = 60.0
    certificate_validity_days: int = 365
    assets: VisualAssetsConfig = VisualAssetsConfig()

    @model_validator(mode="after")
    def validate_thresholds(self) -> "ReportConfig":
        if not self.completion_threshold <= self.achievement_threshold <= self.mastery_threshold:
            raise ValueError(
                "Certificate thresholds must satisfy completion <= achievement <= mastery."
            )
        if self.certificate_validity_days <= 0:
            raise ValueError("certificate_validity_days must be positive.")
        return self


class CatalogConfig(BaseModel):
    """Seed file locations for the lesson catalog and question bank."""

    model_config = ConfigDict(frozen=True)

    lessons_file: str = "config/catalog/lessons.json"
    questions_file: str = "config/catalog/questions.json"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration; the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env.  A bare
    ``AppConfig()`` carries the same defaults as ``config/default.toml``.
    """

    model_config = ConfigDict(frozen=True)

    scoring: ScoringConfig = ScoringConfig()
    rewards: RewardsConfig = RewardsConfig()
    recommendations: RecommendationConfig = RecommendationConfig()
    reports: ReportConfig = ReportConfig()
    catalog: CatalogConfig = CatalogConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply ASSESSMENT_ENGINE_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply ASSESSMENT_ENGINE_* env vars to the raw config dict.

    Supported overrides:
      ASSESSMENT_ENGINE_LOG_LEVEL       → raw["logging"]["level"]
      ASSESSMENT_ENGINE_LESSONS_FILE    → raw["catalog"]["lessons_file"]
      ASSESSMENT_ENGINE_QUESTIONS_FILE  → raw["catalog"]["questions_file"]
      ASSESSMENT_ENGINE_DEBUG           → raw["debug"]
    """
    if log_level := os.environ.get("ASSESSMENT_ENGINE_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if lessons_file := os.environ.get("ASSESSMENT_ENGINE_LESSONS_FILE"):
        raw.setdefault("catalog", {})["lessons_file"] = lessons_file

    if questions_file := os.environ.get("ASSESSMENT_ENGINE_QUESTIONS_FILE"):
        raw.setdefault("catalog", {})["questions_file"] = questions_file

    if debug := os.environ.get("ASSESSMENT_ENGINE_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        scoring=ScoringConfig(**raw.get("scoring", {})),
        rewards=RewardsConfig(**raw.get("rewards", {})),
        recommendations=RecommendationConfig(**raw.get("recommendations", {})),
        reports=ReportConfig(**raw.get("reports", {})),
        catalog=CatalogConfig(**raw.get("catalog", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
