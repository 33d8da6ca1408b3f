"""Utilities for declaratively registering application modules.

Each module package exposes a blueprint and a ``module_metadata`` dict; the
registry imports them, skips disabled modules and mounts the rest at the
metadata URL prefix (a prefix on the definition itself takes precedence).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence

from flask import Blueprint, Flask
from werkzeug.utils import import_string


@dataclass(frozen=True)
class ModuleDefinition:
    """Describe how a blueprint-backed module is registered with the app."""

    import_path: str
    attribute: str
    url_prefix: Optional[str] = None
    version: str = "1.0"

    def load_blueprint(self) -> Blueprint:
        """Import and return the blueprint described by this definition."""

        module = import_string(self.import_path)
        blueprint = getattr(module, self.attribute, None)
        if not isinstance(blueprint, Blueprint):
            raise TypeError(
                "Expected attribute '%s' in '%s' to be a Flask Blueprint, got %r instead"
                % (self.attribute, self.import_path, type(blueprint))
            )
        return blueprint

    def load_metadata(self) -> Mapping[str, Any]:
        """Return the module's ``module_metadata`` dict (empty when it has none)."""

        return getattr(import_string(self.import_path), "module_metadata", {})

    def resolve_prefix(self, metadata: Mapping[str, Any]) -> Optional[str]:
        return self.url_prefix or metadata.get("url_prefix")


def register_modules(app: Flask, modules: Sequence[ModuleDefinition]) -> None:
    """Register all modules in the provided iterable with the Flask app."""

    for module in modules:
        metadata = module.load_metadata()
        if not metadata.get("enabled", True):
            app.logger.info("Module %s is disabled, skipping.", module.import_path)
            continue

        blueprint = module.load_blueprint()
        url_prefix = module.resolve_prefix(metadata)
        app.register_blueprint(blueprint, url_prefix=url_prefix)
        app.logger.debug(
            "Registered module %s (version %s) at prefix %s",
            module.import_path,
            module.version,
            url_prefix or "<root>",
        )


def register_default_modules(app: Flask) -> None:
    """Convenience helper that registers the built-in Wordmem modules."""

    register_modules(app, DEFAULT_MODULES)


DEFAULT_MODULES: Iterable[ModuleDefinition] = (
    ModuleDefinition("wordmem_app.modules.auth", "auth_bp", version="1.0"),
    ModuleDefinition("wordmem_app.modules.wordbooks", "wordbooks_bp", version="1.0"),
    ModuleDefinition("wordmem_app.modules.words", "words_bp", version="1.0"),
    ModuleDefinition("wordmem_app.modules.scraper", "scraper_bp", version="1.0"),
    ModuleDefinition("wordmem_app.modules.training", "training_bp", version="1.0"),
    ModuleDefinition("wordmem_app.modules.errors", "errors_bp", version="1.0"),
    ModuleDefinition("wordmem_app.modules.analysis", "analysis_bp", version="1.0"),
)
