"""Bookkeeping for GPIO pin ownership, modes and interrupt handlers."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

_DAC_PINS = frozenset({25, 26})


class PinMode(Enum):
    INPUT = auto()
    INPUT_PULLUP = auto()
    INPUT_PULLDOWN = auto()
    OUTPUT = auto()
    ANALOG_INPUT = auto()
    ANALOG_OUTPUT = auto()
    INTERRUPT_RISING = auto()
    INTERRUPT_FALLING = auto()
    INTERRUPT_CHANGE = auto()

    @property
    def is_interrupt(self) -> bool:
        return self in _INTERRUPT_MODES


_INTERRUPT_MODES = frozenset(
    {PinMode.INTERRUPT_RISING, PinMode.INTERRUPT_FALLING, PinMode.INTERRUPT_CHANGE}
)


@dataclass
class PinAllocation:
    """Who holds a pin and in which mode."""

    pin: int
    mode: PinMode
    owner: str
    in_use: bool = True


class PinError(Exception):
    """A pin request conflicts with the current allocation or the hardware."""


class GPIOManager:
    """Tracks which component owns each pin so pins are not shared by accident."""

    def __init__(self) -> None:
        self._allocations: dict[int, PinAllocation] = {}
        self._handlers: dict[int, Callable[[], None]] = {}

    @staticmethod
    def _check_mode(pin: int, mode: PinMode) -> None:
        if mode is PinMode.ANALOG_OUTPUT and pin not in _DAC_PINS:
            raise PinError(f"pin {pin} has no DAC for analog output")

    def _active(self, pin: int) -> PinAllocation | None:
        allocation = self._allocations.get(pin)
        return allocation if allocation is not None and allocation.in_use else None

    def allocate_pin(self, pin: int, mode: PinMode, owner: str) -> None:
        """Claim ``pin`` for ``owner``; the current owner may reconfigure it."""
        current = self._active(pin)
        if current is not None and current.owner != owner:
            raise PinError(f"pin {pin} is in use by {current.owner!r}")
        self._check_mode(pin, mode)
        allocation = self._allocations.get(pin)
        if allocation is None:
            self._allocations[pin] = PinAllocation(pin, mode, owner)
        else:
            allocation.mode = mode
            allocation.owner = owner
            allocation.in_use = True

    def release_pin(self, pin: int, owner: str) -> None:
        """Give ``pin`` back; only its current owner may do so."""
        current = self._active(pin)
        if current is None:
            raise PinError(f"pin {pin} is not allocated")
        if current.owner != owner:
            raise PinError(f"pin {pin} is owned by {current.owner!r}, not {owner!r}")
        current.in_use = False
        if current.mode.is_interrupt:
            self.disable_interrupt(pin)

    def is_pin_available(self, pin: int) -> bool:
        return self._active(pin) is None

    def pin_mode(self, pin: int) -> PinMode:
        """Mode of an allocated pin, or ``PinMode.INPUT`` when it is free."""
        current = self._active(pin)
        return current.mode if current is not None else PinMode.INPUT

    def pin_owner(self, pin: int) -> str:
        """Owner of an allocated pin, or an empty string when it is free."""
        current = self._active(pin)
        return current.owner if current is not None else ""

    def configure_interrupt(self, pin: int, mode: PinMode, callback: Callable[[], None]) -> None:
        """Attach ``callback`` to ``pin`` for an interrupt mode."""
        if not mode.is_interrupt:
            raise ValueError(f"{mode.name} is not an interrupt mode")
        if not callable(callback):
            raise TypeError("interrupt callback must be callable")
        self._handlers[pin] = callback

    def disable_interrupt(self, pin: int) -> None:
        self._handlers.pop(pin, None)

    def trigger_interrupt(self, pin: int) -> bool:
        """Run the handler attached to ``pin``; return whether one ran."""
        handler = self._handlers.get(pin)
        if handler is None:
            return False
        handler()
        return True

    def allocations(self) -> list[PinAllocation]:
        """Copies of every allocation record, released ones included."""
        return [dataclasses.replace(a) for a in self._allocations.values()]

    def reset_allocations(self) -> None:
        """Drop every allocation and detach interrupts of pins in use."""
        for allocation in self._allocations.values():
            if allocation.in_use and allocation.mode.is_interrupt:
                self.disable_interrupt(allocation.pin)
        self._allocations.clear()