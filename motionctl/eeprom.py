"""Persistent parameter storage laid out in a fixed-size byte image."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path

ADDR_MAGIC_MARKER = 0
ADDR_VERSION = 2
ADDR_MOTOR_CONFIG_START = 4
ADDR_MOTOR_CONFIG_SIZE = 64
ADDR_SYSTEM_CONFIG_START = 260
ADDR_SYSTEM_CONFIG_SIZE = 64
ADDR_SAFETY_CONFIG_START = 324
ADDR_SAFETY_CONFIG_SIZE = 32
ADDR_USER_DATA_START = 356
ADDR_USER_DATA_SIZE = 128

_PID_OFFSET = 0
_PROFILE_OFFSET = 16
_LIMITS_OFFSET = 32

DEFAULT_SIZE = 512
DEFAULT_MAX_MOTORS = 4
MAGIC_MARKER = 0xA55A
CONFIG_VERSION = 1
ERASED_BYTE = 0xFF

DEFAULT_PID_KP = 1.0
DEFAULT_PID_KI = 0.1
DEFAULT_PID_KD = 0.05
DEFAULT_PID_FF = 0.0
DEFAULT_MAX_VELOCITY = 10000.0
DEFAULT_ACCELERATION = 20000.0
DEFAULT_DECELERATION = 20000.0
DEFAULT_MAX_JERK = 100000.0
DEFAULT_SOFT_LIMIT_MIN = -1000000
DEFAULT_SOFT_LIMIT_MAX = 1000000
DEFAULT_LOG_LEVEL = 3
DEFAULT_DEBUG_ENABLED = False
DEFAULT_STATUS_UPDATE_FREQUENCY_HZ = 10
DEFAULT_POSITION_TOLERANCE = 100
DEFAULT_VELOCITY_TOLERANCE = 50.0
DEFAULT_MAX_TEMPERATURE_C = 80.0

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_I32 = struct.Struct("<i")
_U32 = struct.Struct("<I")
_F32 = struct.Struct("<f")


class EEPROMError(Exception):
    """The store is not ready for the requested operation."""


@dataclass(frozen=True)
class PIDParameters:
    kp: float
    ki: float
    kd: float
    ff: float


@dataclass(frozen=True)
class ProfileParameters:
    max_velocity: float
    acceleration: float
    deceleration: float
    jerk: float


@dataclass(frozen=True)
class SoftLimits:
    min_limit: int
    max_limit: int
    enabled: bool


@dataclass(frozen=True)
class SystemConfig:
    log_level: int
    debug_enabled: bool
    status_update_frequency: int


@dataclass(frozen=True)
class SafetyConfig:
    position_error_threshold: int
    velocity_error_threshold: float
    max_temperature: float


class EEPROMManager:
    """Stores motor, system and safety parameters in a byte image.

    Values are little-endian. Changes live in memory until :meth:`commit`,
    which writes the image to ``path`` when one is given.
    """

    def __init__(
        self,
        size: int = DEFAULT_SIZE,
        max_motors: int = DEFAULT_MAX_MOTORS,
        path: str | Path | None = None,
    ) -> None:
        if size < ADDR_USER_DATA_START + ADDR_USER_DATA_SIZE:
            raise ValueError(f"size {size} is too small for the parameter layout")
        if max_motors <= 0 or (
            ADDR_MOTOR_CONFIG_START + max_motors * ADDR_MOTOR_CONFIG_SIZE > ADDR_SYSTEM_CONFIG_START
        ):
            raise ValueError(f"max_motors {max_motors} does not fit the motor area")
        self._size = size
        self._max_motors = max_motors
        self._path = Path(path) if path is not None else None
        self._image = bytearray([ERASED_BYTE]) * size
        self._initialized = False
        self._config_valid = False
        self._config_version = CONFIG_VERSION

    @property
    def size(self) -> int:
        return self._size

    @property
    def config_version(self) -> int:
        return self._config_version

    def initialize(self) -> None:
        """Load the image and check it; write defaults if it holds no valid data."""
        if self._path is not None and self._path.exists():
            data = self._path.read_bytes()[: self._size]
            self._image = bytearray(data) + bytearray([ERASED_BYTE]) * (self._size - len(data))
        self._initialized = True

        if self._read(_U16, ADDR_MAGIC_MARKER) == MAGIC_MARKER:
            self._config_version = self._read(_U8, ADDR_VERSION)
            self._config_valid = True
        else:
            self._config_valid = False
            self.reset_to_defaults()

    def is_config_valid(self) -> bool:
        return self._initialized and self._config_valid

    def commit(self) -> None:
        """Make pending changes permanent."""
        self._require_initialized()
        if self._path is not None:
            self._path.write_bytes(bytes(self._image))

    def reset_to_defaults(self) -> None:
        """Overwrite every parameter block with defaults and commit."""
        self._require_initialized()
        self._write(_U16, ADDR_MAGIC_MARKER, MAGIC_MARKER)
        self._write(_U8, ADDR_VERSION, CONFIG_VERSION)
        for index in range(self._max_motors):
            self.save_pid_parameters(
                index, DEFAULT_PID_KP, DEFAULT_PID_KI, DEFAULT_PID_KD, DEFAULT_PID_FF
            )
            self.save_profile_parameters(
                index,
                DEFAULT_MAX_VELOCITY,
                DEFAULT_ACCELERATION,
                DEFAULT_DECELERATION,
                DEFAULT_MAX_JERK,
            )
            self.save_soft_limits(index, DEFAULT_SOFT_LIMIT_MIN, DEFAULT_SOFT_LIMIT_MAX, True)
        self.save_system_config(
            DEFAULT_LOG_LEVEL, DEFAULT_DEBUG_ENABLED, DEFAULT_STATUS_UPDATE_FREQUENCY_HZ
        )
        self.save_safety_config(
            DEFAULT_POSITION_TOLERANCE, DEFAULT_VELOCITY_TOLERANCE, DEFAULT_MAX_TEMPERATURE_C
        )
        self._config_valid = False
        self.commit()
        self._config_version = CONFIG_VERSION
        self._config_valid = True

    def load_pid_parameters(self, motor_index: int) -> PIDParameters:
        base = self._motor_address(motor_index, _PID_OFFSET, loading=True)
        return PIDParameters(*self._read_floats(base, 4))

    def save_pid_parameters(
        self, motor_index: int, kp: float, ki: float, kd: float, ff: float
    ) -> None:
        base = self._motor_address(motor_index, _PID_OFFSET, loading=False)
        self._write_floats(base, (kp, ki, kd, ff))

    def load_profile_parameters(self, motor_index: int) -> ProfileParameters:
        base = self._motor_address(motor_index, _PROFILE_OFFSET, loading=True)
        return ProfileParameters(*self._read_floats(base, 4))

    def save_profile_parameters(
        self,
        motor_index: int,
        max_velocity: float,
        acceleration: float,
        deceleration: float,
        jerk: float,
    ) -> None:
        base = self._motor_address(motor_index, _PROFILE_OFFSET, loading=False)
        self._write_floats(base, (max_velocity, acceleration, deceleration, jerk))

    def load_soft_limits(self, motor_index: int) -> SoftLimits:
        base = self._motor_address(motor_index, _LIMITS_OFFSET, loading=True)
        return SoftLimits(
            self._read(_I32, base),
            self._read(_I32, base + _I32.size),
            self._read(_U8, base + 2 * _I32.size) != 0,
        )

    def save_soft_limits(
        self, motor_index: int, min_limit: int, max_limit: int, enabled: bool
    ) -> None:
        base = self._motor_address(motor_index, _LIMITS_OFFSET, loading=False)
        self._write(_I32, base, min_limit)
        self._write(_I32, base + _I32.size, max_limit)
        self._write(_U8, base + 2 * _I32.size, 1 if enabled else 0)

    def load_system_config(self) -> SystemConfig:
        self._require_valid()
        base = ADDR_SYSTEM_CONFIG_START
        return SystemConfig(
            self._read(_U8, base),
            self._read(_U8, base + 1) != 0,
            self._read(_U8, base + 2),
        )

    def save_system_config(
        self, log_level: int, debug_enabled: bool, status_update_frequency: int
    ) -> None:
        self._require_initialized()
        base = ADDR_SYSTEM_CONFIG_START
        self._write(_U8, base, log_level)
        self._write(_U8, base + 1, 1 if debug_enabled else 0)
        self._write(_U8, base + 2, status_update_frequency)

    def load_safety_config(self) -> SafetyConfig:
        self._require_valid()
        base = ADDR_SAFETY_CONFIG_START
        return SafetyConfig(
            self._read(_U32, base),
            self._read(_F32, base + _U32.size),
            self._read(_F32, base + _U32.size + _F32.size),
        )

    def save_safety_config(
        self,
        position_error_threshold: int,
        velocity_error_threshold: float,
        max_temperature: float,
    ) -> None:
        self._require_initialized()
        base = ADDR_SAFETY_CONFIG_START
        self._write(_U32, base, position_error_threshold)
        self._write(_F32, base + _U32.size, velocity_error_threshold)
        self._write(_F32, base + _U32.size + _F32.size, max_temperature)

    def save_user_data(self, data: bytes, address: int) -> int:
        """Write raw bytes at ``address``, cut at the end of the store.

        Returns the number of bytes written.
        """
        self._require_initialized()
        self._check_address(address)
        chunk = bytes(data)[: self._size - address]
        self._image[address : address + len(chunk)] = chunk
        return len(chunk)

    def load_user_data(self, size: int, address: int) -> bytes:
        """Read up to ``size`` raw bytes from ``address``, cut at the end of the store."""
        self._require_valid()
        self._check_address(address)
        if size < 0:
            raise ValueError(f"size must not be negative, got {size}")
        return bytes(self._image[address : min(address + size, self._size)])

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise EEPROMError("EEPROM manager is not initialized")

    def _require_valid(self) -> None:
        self._require_initialized()
        if not self._config_valid:
            raise EEPROMError("EEPROM holds no valid configuration")

    def _check_address(self, address: int) -> None:
        if not 0 <= address <= self._size:
            raise ValueError(f"address {address} is outside the store of {self._size} bytes")

    def _motor_address(self, motor_index: int, offset: int, *, loading: bool) -> int:
        if loading:
            self._require_valid()
        else:
            self._require_initialized()
        if not 0 <= motor_index < self._max_motors:
            raise IndexError(f"motor index {motor_index} out of range")
        return ADDR_MOTOR_CONFIG_START + motor_index * ADDR_MOTOR_CONFIG_SIZE + offset

    def _read(self, fmt: struct.Struct, address: int):
        return fmt.unpack_from(self._image, address)[0]

    def _write(self, fmt: struct.Struct, address: int, value) -> None:
        try:
            fmt.pack_into(self._image, address, value)
        except struct.error as exc:
            raise ValueError(f"cannot store {value!r} at address {address}: {exc}") from exc

    def _read_floats(self, base: int, count: int) -> list[float]:
        return [self._read(_F32, base + i * _F32.size) for i in range(count)]

    def _write_floats(self, base: int, values) -> None:
        for i, value in enumerate(values):
            self._write(_F32, base + i * _F32.size, value)