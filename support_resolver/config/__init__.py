from support_resolver.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
