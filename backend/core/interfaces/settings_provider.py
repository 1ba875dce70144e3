# core/interfaces/settings_provider.py
from abc import ABC, abstractmethod

from core.schemas import CostSettings


class SettingsProvider(ABC):
    """What pricing needs to read the business cost configuration."""

    @abstractmethod
    def get_settings(self, db) -> CostSettings:
        """Returns a snapshot of the current settings, merged over defaults."""
        ...
