"""Process-wide registry of storage driver factories."""

from typing import Callable, Optional

from common.logging_config import get_logger
from teldrive.config import Config

logger = get_logger(__name__)

DriverFactory = Callable[[Config], object]

_drivers: dict[str, DriverFactory] = {}


def register_driver(name: str, factory: DriverFactory) -> None:
    """
    Register a driver factory under a name.

    Raises:
        ValueError: If the name is already taken
    """
    if name in _drivers:
        raise ValueError(f"driver '{name}' is already registered")
    _drivers[name] = factory
    logger.debug(f"Registered driver {name}")


def unregister_driver(name: str) -> Optional[DriverFactory]:
    """Remove a driver; returns its factory, or None if it was not registered."""
    return _drivers.pop(name, None)


def registered_drivers() -> list[str]:
    return sorted(_drivers)


def create_driver(name: str, config: Config):
    """
    Build an uninitialized driver instance.

    Raises:
        KeyError: If no driver is registered under the name
    """
    try:
        factory = _drivers[name]
    except KeyError:
        raise KeyError(f"unknown driver '{name}'") from None
    return factory(config)


def register_default_drivers() -> None:
    """Register the built-in drivers; safe to call more than once."""
    from teldrive.storage import TeldriveStorage

    if "teldrive" not in _drivers:
        register_driver("teldrive", TeldriveStorage)
