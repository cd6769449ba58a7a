from .field import SettingsField
from .settings import SigmatchSettings, get_settings
from .struct import AppSettings

__all__ = ["AppSettings", "SettingsField", "SigmatchSettings", "get_settings"]
