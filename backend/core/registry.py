# core/registry.py - Module Registry for the inventory/settings/trash providers
#
# Modules advertise the interfaces they implement (InventoryStore,
# SettingsProvider, TrashBin) and look up the ones they need. The app factory
# checks at startup that every REQUIRES declaration has a provider.

import logging
from typing import Any

log = logging.getLogger("printdesk.registry")


class ModuleRegistry:
    """
    Lightweight dependency injection registry keyed by interface name.

    register_provider() is called from a module's register(app, registry);
    get_provider() returns None for optional lookups, require() raises for
    mandatory ones.
    """

    def __init__(self):
        self._providers: dict[str, Any] = {}
        self._declared_requires: list[tuple[str, str]] = []  # (module_id, interface)

    def register_provider(self, interface_name: str, impl: Any) -> None:
        """Register an implementation for the named interface (last writer wins)."""
        existing = self._providers.get(interface_name)
        if existing is not None and existing is not impl:
            log.warning(
                f"Interface '{interface_name}' provided by {type(existing).__name__!r} "
                f"is replaced by {type(impl).__name__!r}"
            )
        self._providers[interface_name] = impl
        log.debug(f"Registered provider for '{interface_name}': {type(impl).__name__}")

    def get_provider(self, interface_name: str) -> Any:
        """Return the provider for an interface, or None when nothing registered it."""
        provider = self._providers.get(interface_name)
        if provider is None:
            log.warning(f"No provider registered for interface '{interface_name}'")
        return provider

    def require(self, interface_name: str) -> Any:
        """Return the provider for an interface; a missing provider is a wiring bug."""
        provider = self._providers.get(interface_name)
        if provider is None:
            raise RuntimeError(
                f"Interface '{interface_name}' has no provider. "
                "Is the module that implements it loaded?"
            )
        return provider

    def record_requires(self, module_id: str, requires: list[str]) -> None:
        for iface in requires:
            self._declared_requires.append((module_id, iface))

    def validate_dependencies(self) -> bool:
        """Log every REQUIRES without a provider. Returns True when all are satisfied."""
        missing = [
            (module_id, iface)
            for module_id, iface in self._declared_requires
            if iface not in self._providers
        ]
        for module_id, iface in missing:
            log.error(f"Unsatisfied dependency: module '{module_id}' requires '{iface}'")
        if not missing:
            log.info(
                f"All module dependencies satisfied "
                f"({len(self._declared_requires)} declarations checked)"
            )
        return not missing

    @property
    def providers(self) -> dict[str, Any]:
        """Read-only view of all registered providers."""
        return dict(self._providers)


registry = ModuleRegistry()
