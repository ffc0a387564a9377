"""Numeric helpers for motion profiles and control loops."""

from __future__ import annotations

import math


def constrain(value, minimum, maximum):
    """Clamp ``value`` into ``[minimum, maximum]``."""
    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value


def lerp(a, b, t: float):
    """Linear interpolation between ``a`` and ``b``; ``t`` is clamped to [0, 1]."""
    t = constrain(t, 0.0, 1.0)
    return a + (b - a) * t


def calculate_velocity(displacement: float, time_seconds: float) -> float:
    """Displacement over time, or 0 for a non-positive time."""
    return displacement / time_seconds if time_seconds > 0.0 else 0.0


def calculate_acceleration(velocity_change: float, time_seconds: float) -> float:
    """Velocity change over time, or 0 for a non-positive time."""
    return velocity_change / time_seconds if time_seconds > 0.0 else 0.0


def apply_dead_band(value: float, threshold: float) -> float:
    """Return 0 when ``|value|`` is below ``threshold``, else ``value``."""
    if abs(value) < threshold:
        return 0.0
    return value


def trapezoidal_profile_duration(distance: float, max_velocity: float, acceleration: float) -> float:
    """Time to cover ``distance`` with symmetric acceleration and deceleration."""
    accel_distance = max_velocity * max_velocity / acceleration
    if accel_distance > distance / 2.0:
        peak_velocity = math.sqrt(distance * acceleration / 2.0)
        return 2.0 * peak_velocity / acceleration
    accel_time = max_velocity / acceleration
    const_time = (distance - accel_distance) / max_velocity
    return 2.0 * accel_time + const_time


def trapezoidal_position(
    time: float, total_time: float, distance: float, max_velocity: float, acceleration: float
) -> float:
    """Position at ``time`` within a trapezoidal (or triangular) profile."""
    if time <= 0.0:
        return 0.0
    if time >= total_time:
        return distance

    accel_time = max_velocity / acceleration
    const_time = total_time - 2.0 * accel_time
    remaining = total_time - time

    if const_time < 0.0:
        if time <= total_time / 2.0:
            return 0.5 * acceleration * time * time
        return distance - 0.5 * acceleration * remaining * remaining

    if time <= accel_time:
        return 0.5 * acceleration * time * time
    if time <= accel_time + const_time:
        return 0.5 * acceleration * accel_time * accel_time + max_velocity * (time - accel_time)
    return distance - 0.5 * acceleration * remaining * remaining


def trapezoidal_velocity(
    time: float, total_time: float, distance: float, max_velocity: float, acceleration: float
) -> float:
    """Velocity at ``time`` within a trapezoidal (or triangular) profile."""
    if time <= 0.0 or time >= total_time:
        return 0.0

    accel_time = max_velocity / acceleration
    const_time = total_time - 2.0 * accel_time

    if const_time < 0.0:
        if time <= total_time / 2.0:
            return acceleration * time
        return acceleration * (total_time - time)

    if time <= accel_time:
        return acceleration * time
    if time <= accel_time + const_time:
        return max_velocity
    return acceleration * (total_time - time)


def s_curve_position(
    time: float,
    total_time: float,
    distance: float,
    max_velocity: float,
    max_acceleration: float,
    max_jerk: float,
) -> float:
    """Smooth position using a fifth-order polynomial over normalised time.

    The velocity, acceleration and jerk limits are accepted for interface
    symmetry; the polynomial does not use them.
    """
    if time <= 0.0:
        return 0.0
    if time >= total_time:
        return distance
    t = time / total_time
    s = 10.0 * t**3 - 15.0 * t**4 + 6.0 * t**5
    return s * distance


def low_pass_filter(current_value: float, new_value: float, alpha: float) -> float:
    """First-order low-pass filter; ``alpha`` is clamped to [0, 1]."""
    alpha = constrain(alpha, 0.0, 1.0)
    return current_value * (1.0 - alpha) + new_value * alpha


def steps_to_mm(steps: int, steps_per_mm: float) -> float:
    """Convert a step count to millimetres."""
    return float(steps) / steps_per_mm


def mm_to_steps(mm: float, steps_per_mm: float) -> int:
    """Convert millimetres to steps, truncating toward zero."""
    return int(mm * steps_per_mm)