"""App store HTTP API layer.

Usage
-----
::

    from appstore.api import create_app

    app = create_app()              # health-only mode
    app = create_app(dependencies)  # registry endpoints and lifecycle
"""

from appstore.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
