"""
Engine configuration.

Risk thresholds can be tuned per deployment through environment variables
(or a .env file). Settings are loaded once by the caller and passed into the
engine; the engine itself never reads the environment.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field


class RiskSettings(BaseModel):
    """Thresholds used by the risk battery."""
    model_config = ConfigDict(frozen=True)

    points_competitive_threshold: int = 70
    points_recent_trend_threshold: int = 75
    high_points_margin: int = 80
    upper_age_bound: int = 45
    age_margin_years: int = Field(default=2, ge=0)
    skills_expiry_window_months: int = 6
    english_max_age_months: int = 30
    english_borderline_margin: float = 0.5
    visa_expiry_window_months: int = 3
    employment_gap_months: float = 3
    audit_defensibility_min_signals: int = Field(default=2, ge=1)


ENV_VARS = {
    "points_competitive_threshold": "ASSESSMENT_POINTS_COMPETITIVE_THRESHOLD",
    "points_recent_trend_threshold": "ASSESSMENT_POINTS_RECENT_TREND_THRESHOLD",
    "high_points_margin": "ASSESSMENT_HIGH_POINTS_MARGIN",
    "upper_age_bound": "ASSESSMENT_UPPER_AGE_BOUND",
    "age_margin_years": "ASSESSMENT_AGE_MARGIN_YEARS",
    "skills_expiry_window_months": "ASSESSMENT_SKILLS_EXPIRY_WINDOW_MONTHS",
    "english_max_age_months": "ASSESSMENT_ENGLISH_MAX_AGE_MONTHS",
    "english_borderline_margin": "ASSESSMENT_ENGLISH_BORDERLINE_MARGIN",
    "visa_expiry_window_months": "ASSESSMENT_VISA_EXPIRY_WINDOW_MONTHS",
    "employment_gap_months": "ASSESSMENT_EMPLOYMENT_GAP_MONTHS",
    "audit_defensibility_min_signals": "ASSESSMENT_AUDIT_DEFENSIBILITY_MIN_SIGNALS",
}


def load_settings(env_file: Optional[str] = None) -> RiskSettings:
    """
    Build RiskSettings from the environment.

    Unset variables keep their defaults. Invalid values raise a pydantic
    ValidationError.
    """
    load_dotenv(env_file)

    overrides = {}
    for field_name, env_key in ENV_VARS.items():
        value = os.getenv(env_key)
        if value is not None and value.strip():
            overrides[field_name] = value.strip()

    return RiskSettings(**overrides)


DEFAULT_SETTINGS = RiskSettings()
