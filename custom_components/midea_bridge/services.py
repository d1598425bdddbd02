"""Characteristic tables exposed to the control surface.

An ``AccessoryService`` describes one service of an accessory: the
characteristics it declares, their value ranges, their get and set handlers
and the value last advertised for each of them. The control-surface adapter
wires these tables once and then talks to the accessory only through
``handle_get``, ``handle_set`` and the update callbacks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .models import MideaBridgeError

if TYPE_CHECKING:
    from collections.abc import Callable

_LOGGER = logging.getLogger(__name__)


class UnknownCharacteristicError(MideaBridgeError):
    """Exception raised for a characteristic the service does not expose."""


@dataclass(frozen=True)
class CharacteristicProps:
    """Declared value range of a characteristic."""

    min_value: float | None = None
    max_value: float | None = None
    min_step: float | None = None
    valid_values: tuple[int, ...] | None = None


@dataclass
class Characteristic:
    """A single characteristic with its handlers and advertised value."""

    name: str
    get_handler: Callable[[], Any] | None = None
    set_handler: Callable[[Any], None] | None = None
    props: CharacteristicProps = field(default_factory=CharacteristicProps)
    value: Any = None

    @property
    def readable(self) -> bool:
        return self.get_handler is not None

    @property
    def writable(self) -> bool:
        return self.set_handler is not None


class AccessoryService:
    """One service of an accessory and the characteristics it exposes."""

    def __init__(self, service_type: str, display_name: str) -> None:
        self.service_type = service_type
        self.display_name = display_name
        self.characteristics: dict[str, Characteristic] = {}
        self._update_callbacks: list[Callable[[str, str, Any], None]] = []

    def __repr__(self) -> str:
        return (
            f"AccessoryService({self.service_type!r}, {self.display_name!r}, "
            f"characteristics={list(self.characteristics)})"
        )

    def add_characteristic(
        self,
        name: str,
        *,
        get_handler: Callable[[], Any] | None = None,
        set_handler: Callable[[Any], None] | None = None,
        props: CharacteristicProps | None = None,
        value: Any = None,  # noqa: ANN401
    ) -> Characteristic:
        """Declare a characteristic on this service.

        Args:
            name: Characteristic name.
            get_handler: Returns the current external value.
            set_handler: Applies an external value.
            props: Declared value range, computed once.
            value: Initial advertised value.

        Returns:
            The declared characteristic.

        """
        characteristic = Characteristic(
            name=name,
            get_handler=get_handler,
            set_handler=set_handler,
            props=props or CharacteristicProps(),
            value=value,
        )
        self.characteristics[name] = characteristic
        return characteristic

    def get_characteristic(self, name: str) -> Characteristic:
        try:
            return self.characteristics[name]
        except KeyError as err:
            msg = f"{self.service_type} has no characteristic {name}"
            raise UnknownCharacteristicError(msg) from err

    def handle_get(self, name: str) -> Any:  # noqa: ANN401
        """Answer a get request for a characteristic.

        A failing get handler is logged and answered with the value last
        advertised, since the control surface needs a value synchronously.

        Raises:
            UnknownCharacteristicError: If the characteristic is not exposed.

        """
        characteristic = self.get_characteristic(name)
        _LOGGER.debug("Triggered GET %s of %s", name, self.display_name)
        if characteristic.get_handler is None:
            return characteristic.value

        try:
            return characteristic.get_handler()
        except Exception:
            _LOGGER.exception("Error reading %s of %s", name, self.display_name)
            return characteristic.value

    def handle_set(self, name: str, value: Any) -> None:  # noqa: ANN401
        """Apply a set request for a characteristic.

        Handler failures are logged and never reach the caller.

        Raises:
            UnknownCharacteristicError: If the characteristic is not exposed
                or is read-only.

        """
        characteristic = self.get_characteristic(name)
        if characteristic.set_handler is None:
            msg = f"{name} of {self.service_type} is read-only"
            raise UnknownCharacteristicError(msg)

        _LOGGER.debug("Triggered SET %s of %s to %s", name, self.display_name, value)
        try:
            characteristic.set_handler(value)
        except Exception:
            _LOGGER.exception(
                "Error setting %s of %s to %s", name, self.display_name, value
            )

    def update_characteristic(self, name: str, value: Any) -> None:  # noqa: ANN401
        """Advertise a new value and notify every registered callback."""
        characteristic = self.get_characteristic(name)
        characteristic.value = value

        for callback in list(self._update_callbacks):
            try:
                callback(self.service_type, name, value)
            except Exception:
                _LOGGER.exception("Error in characteristic update callback")

    def register_update_callback(
        self,
        callback: Callable[[str, str, Any], None],
    ) -> Callable[[], None]:
        """Register a callback for advertised value updates.

        Args:
            callback: Called with service type, characteristic name and value.

        Returns:
            A function to unregister the callback.

        """
        self._update_callbacks.append(callback)

        def unregister() -> None:
            if callback in self._update_callbacks:
                self._update_callbacks.remove(callback)

        return unregister
