"""Core application modules."""
from .config import settings, Settings, ProviderConfig

__all__ = ["settings", "Settings", "ProviderConfig"]
