import pytest

from motionctl import math_utils as mu


@pytest.mark.parametrize(
    "value, expected",
    [(-5, 0), (0, 0), (5, 5), (10, 10), (15, 10)],
)
def test_constrain(value, expected):
    assert mu.constrain(value, 0, 10) == expected


def test_lerp_clamps_factor():
    assert mu.lerp(10.0, 20.0, 0.0) == 10.0
    assert mu.lerp(10.0, 20.0, 1.0) == 20.0
    assert mu.lerp(10.0, 20.0, -3.0) == 10.0
    assert mu.lerp(10.0, 20.0, 7.0) == 20.0
    assert 10.0 < mu.lerp(10.0, 20.0, 0.3) < 20.0


def test_velocity_and_acceleration_guard_zero_time():
    assert mu.calculate_velocity(100.0, 0.0) == 0.0
    assert mu.calculate_velocity(100.0, -1.0) == 0.0
    assert mu.calculate_acceleration(50.0, 0.0) == 0.0
    assert mu.calculate_velocity(100.0, 1.0) == 100.0
    assert mu.calculate_acceleration(50.0, 1.0) == 50.0


def test_dead_band():
    assert mu.apply_dead_band(0.05, 0.1) == 0.0
    assert mu.apply_dead_band(-0.05, 0.1) == 0.0
    assert mu.apply_dead_band(0.5, 0.1) == 0.5
    assert mu.apply_dead_band(-0.5, 0.1) == -0.5


def test_trapezoid_duration_matches_area():
    distance, vmax, accel = 1000.0, 100.0, 100.0
    duration = mu.trapezoidal_profile_duration(distance, vmax, accel)
    # Area under the trapezoid equals the distance travelled.
    assert vmax * (duration - vmax / accel) == pytest.approx(distance)


@pytest.mark.parametrize(
    "distance, vmax, accel",
    [(1000.0, 100.0, 100.0), (50.0, 1000.0, 100.0)],
)
def test_trapezoid_position_endpoints_and_monotonic(distance, vmax, accel):
    total = mu.trapezoidal_profile_duration(distance, vmax, accel)
    assert mu.trapezoidal_position(0.0, total, distance, vmax, accel) == 0.0
    assert mu.trapezoidal_position(total, total, distance, vmax, accel) == distance
    samples = [
        mu.trapezoidal_position(total * i / 50, total, distance, vmax, accel) for i in range(51)
    ]
    assert all(b >= a - 1e-9 for a, b in zip(samples, samples[1:]))
    assert samples[-2] == pytest.approx(distance, rel=0.05)


@pytest.mark.parametrize(
    "distance, vmax, accel",
    [(1000.0, 100.0, 100.0), (50.0, 1000.0, 100.0)],
)
def test_trapezoid_velocity_symmetric(distance, vmax, accel):
    total = mu.trapezoidal_profile_duration(distance, vmax, accel)
    assert mu.trapezoidal_velocity(0.0, total, distance, vmax, accel) == 0.0
    assert mu.trapezoidal_velocity(total, total, distance, vmax, accel) == 0.0
    for frac in (0.05, 0.2, 0.4):
        t = total * frac
        assert mu.trapezoidal_velocity(t, total, distance, vmax, accel) == pytest.approx(
            mu.trapezoidal_velocity(total - t, total, distance, vmax, accel)
        )


def test_trapezoid_velocity_cruises_at_max():
    distance, vmax, accel = 1000.0, 100.0, 100.0
    total = mu.trapezoidal_profile_duration(distance, vmax, accel)
    assert mu.trapezoidal_velocity(total / 2, total, distance, vmax, accel) == vmax
    assert mu.trapezoidal_velocity(0.5, total, distance, vmax, accel) == pytest.approx(accel * 0.5)


def test_s_curve_shape():
    total, distance = 2.0, 400.0
    assert mu.s_curve_position(0.0, total, distance, 1, 1, 1) == 0.0
    assert mu.s_curve_position(total, total, distance, 1, 1, 1) == distance
    assert mu.s_curve_position(total / 2, total, distance, 1, 1, 1) == pytest.approx(distance / 2)
    early = mu.s_curve_position(0.3, total, distance, 1, 1, 1)
    late = mu.s_curve_position(total - 0.3, total, distance, 1, 1, 1)
    assert early + late == pytest.approx(distance)


def test_low_pass_filter():
    assert mu.low_pass_filter(10.0, 20.0, 0.0) == 10.0
    assert mu.low_pass_filter(10.0, 20.0, 1.0) == 20.0
    assert mu.low_pass_filter(10.0, 20.0, 5.0) == 20.0
    assert mu.low_pass_filter(10.0, 20.0, -1.0) == 10.0
    assert 10.0 < mu.low_pass_filter(10.0, 20.0, 0.25) < 20.0


def test_step_conversions():
    assert mu.steps_to_mm(800, 80.0) == pytest.approx(10.0)
    assert mu.mm_to_steps(10.0, 80.0) == 800
    assert mu.mm_to_steps(mu.steps_to_mm(1234, 80.0), 80.0) in (1233, 1234)
    assert mu.mm_to_steps(-0.99, 1.0) == 0