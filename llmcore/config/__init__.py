from .settings import Settings, get_settings, settings_public_summary

__all__ = ["Settings", "get_settings", "settings_public_summary"]
