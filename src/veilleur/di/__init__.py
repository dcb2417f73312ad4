"""
Dependency injection.
"""

from typing import Optional

from veilleur.di.container import DIContainer

_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """Get global container instance."""
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


__all__ = ["DIContainer", "get_container"]
