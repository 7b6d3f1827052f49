"""
Environment configuration for git-experts.

Every setting has a stable default (see ExpertsConfig); the variables
below override it, and command-line flags override the environment.
A .env file in the working directory (or one of its parents) is read
when the configuration is loaded.

    GIT_EXPERTS_WEIGHTS        commits,lines,latest,earliest  (default 1,1,1,1)
    GIT_EXPERTS_SCORE_SCALE    display multiplier             (default 100)
    GIT_EXPERTS_REV            revision to blame              (default HEAD)
    GIT_EXPERTS_DETECT_MOVES   blame -M                       (default off)
    GIT_EXPERTS_DETECT_COPIES  blame -C                       (default off)
    GIT_EXPERTS_FIRST_PARENT   blame --first-parent           (default off)
    GIT_EXPERTS_TABLE          table output                   (default on)
    LOG_LEVEL                  logging level                  (default WARNING)
"""

import math
import os
from typing import Optional

import dotenv

from .blame.models import ExpertsConfig, WeightVector

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return value.strip() if value and value.strip() else default


def _env_scale(default: float) -> float:
    value = os.getenv("GIT_EXPERTS_SCORE_SCALE")
    if value is None or not value.strip():
        return default

    try:
        scale = float(value)
    except ValueError:
        raise ValueError(f"GIT_EXPERTS_SCORE_SCALE must be a number, got {value!r}") from None

    if not math.isfinite(scale) or scale <= 0:
        raise ValueError(f"GIT_EXPERTS_SCORE_SCALE must be positive, got {value!r}")
    return scale


def load_config(base: Optional[ExpertsConfig] = None) -> ExpertsConfig:
    """
    Build an ExpertsConfig from the environment.

    Args:
        base: Optional config supplying the defaults

    Raises:
        InvalidWeightSpec: GIT_EXPERTS_WEIGHTS is malformed
        ValueError: GIT_EXPERTS_SCORE_SCALE is malformed
    """
    # Variables already in the environment take precedence over .env
    dotenv.load_dotenv(dotenv.find_dotenv(usecwd=True))

    base = base or ExpertsConfig()

    weights = base.weights
    weight_spec = os.getenv("GIT_EXPERTS_WEIGHTS")
    if weight_spec and weight_spec.strip():
        weights = WeightVector.parse(weight_spec)

    return ExpertsConfig(
        weights=weights,
        score_scale=_env_scale(base.score_scale),
        rev=_env_str("GIT_EXPERTS_REV", base.rev),
        detect_moves=_env_flag("GIT_EXPERTS_DETECT_MOVES", base.detect_moves),
        detect_copies=_env_flag("GIT_EXPERTS_DETECT_COPIES", base.detect_copies),
        first_parent=_env_flag("GIT_EXPERTS_FIRST_PARENT", base.first_parent),
        table=_env_flag("GIT_EXPERTS_TABLE", base.table),
        log_level=_env_str("LOG_LEVEL", base.log_level).upper()
    )
