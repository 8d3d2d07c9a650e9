"""Name-based lookup of drivers and adaptors.

Drivers and adaptors register under their ``name`` class attribute so that
a transport can be assembled from configuration alone.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from smstransport.adaptor import Adaptor, PassthroughAdaptor
from smstransport.driver.base import Driver
from smstransport.driver.config import DriverOptions
from smstransport.driver.gammu_json import GammuJsonDriver
from smstransport.exceptions import AdaptorLoadError, DriverLoadError

T = TypeVar("T")

# Global registries: name -> class
DRIVER_REGISTRY: dict[str, type[Driver]] = {}
ADAPTOR_REGISTRY: dict[str, type[Adaptor]] = {}


def _register(registry: dict[str, type[T]], cls: type[T], kind: str) -> type[T]:
    name = getattr(cls, "name", None)
    if not isinstance(name, str) or not name or name == "abstract":
        raise ValueError(f"{cls.__name__} has no usable name attribute. Cannot register {kind}.")

    existing = registry.get(name)
    if existing is not None and existing is not cls:
        raise ValueError(
            f"{kind.capitalize()} name {name!r} already registered to {existing.__name__}. "
            f"Cannot register {cls.__name__} under the same name."
        )
    registry[name] = cls
    return cls


def register_driver(driver_class: type[Driver]) -> type[Driver]:
    """Register a driver class under its ``name``.

    Usable as a class decorator. Registering the same class twice is a
    no-op.

    Raises:
        ValueError: If the class has no name or the name is taken
    """
    return _register(DRIVER_REGISTRY, driver_class, "driver")


def register_adaptor(adaptor_class: type[Adaptor]) -> type[Adaptor]:
    """Register an adaptor class under its ``name``."""
    return _register(ADAPTOR_REGISTRY, adaptor_class, "adaptor")


def load_driver(
    name: str,
    options: DriverOptions | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> Driver:
    """Instantiate and initialize the driver registered as ``name``.

    Args:
        name: Registry name (e.g. ``"gammu-json"``)
        options: Driver options, passed to ``initialize``
        **kwargs: Constructor arguments (e.g. ``session_factory``)

    Raises:
        DriverLoadError: If no driver is registered under ``name``
    """
    try:
        driver_class = DRIVER_REGISTRY[name]
    except KeyError:
        raise DriverLoadError(
            f"No driver named {name!r}; available: {sorted(DRIVER_REGISTRY)}"
        ) from None
    return driver_class(**kwargs).initialize(options)


def load_adaptor(name: str, options: Mapping[str, Any] | None = None) -> Adaptor:
    """Instantiate and initialize the adaptor registered as ``name``.

    Raises:
        AdaptorLoadError: If no adaptor is registered under ``name``
    """
    try:
        adaptor_class = ADAPTOR_REGISTRY[name]
    except KeyError:
        raise AdaptorLoadError(
            f"No adaptor named {name!r}; available: {sorted(ADAPTOR_REGISTRY)}"
        ) from None
    return adaptor_class().initialize(options)


register_driver(GammuJsonDriver)
register_adaptor(PassthroughAdaptor)
