"""
Skilled migration assessment engine.
"""

from .config import RiskSettings, load_settings

__all__ = ["RiskSettings", "load_settings"]
