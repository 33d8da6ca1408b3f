"""Configuration entry point (see :mod:`wordmem_app.core.config`)."""

from .core.config import BASE_DIR, Config

__all__ = ["BASE_DIR", "Config"]
