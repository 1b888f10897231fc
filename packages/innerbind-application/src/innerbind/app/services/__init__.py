from .discovery import SourceDiscovery

__all__ = ["SourceDiscovery"]
