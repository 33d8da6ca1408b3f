"""Application-wide extensions.

Re-exported from :mod:`wordmem_app.core.extensions` so modules can import
them without causing circular dependencies.
"""

from .core.extensions import db, login_manager, migrate

__all__ = ["db", "login_manager", "migrate"]
