# motionctl

Building blocks for a motion-control system, written as plain Python objects
that run and can be tested without hardware.

## What is inside

- `motionctl.circular_buffer.CircularBuffer`: a ring of the most recent
  samples. The capacity must be a positive power of two (`ValueError`
  otherwise). It offers `push()`, `newest()`, `oldest()`, `get()` (negative
  offset, `-1` is the newest), `at()` (index from the oldest), `len()`,
  iteration from oldest to newest, `is_empty()`, `is_full()`, `capacity()`,
  `average()`, `minimum()` and `maximum()`. Where no item exists, these
  return `0`.
- `motionctl.math_utils`: `constrain`, `lerp`, `calculate_velocity`,
  `calculate_acceleration`, `apply_dead_band`, `low_pass_filter`, unit
  conversion (`steps_to_mm`, `mm_to_steps`) and motion-profile helpers
  (`trapezoidal_profile_duration`, `trapezoidal_position`,
  `trapezoidal_velocity`, `s_curve_position`).
- `motionctl.logger`: `Logger` keeps entries (`LogEntry`) at or below its
  `LogLevel` in a bounded buffer, writes errors out at once, and writes the
  buffer out on `process_pending()`. Output goes to a stream (standard output
  by default) and to callbacks added with `add_output()`. The clock can be
  injected.
- `motionctl.gpio.GPIOManager`: pin allocation by owner with `PinMode` and
  `PinAllocation`; conflicts raise `PinError`. Analog output is only allowed
  on pins 25 and 26. Interrupt callbacks are attached with
  `configure_interrupt()` and run by `trigger_interrupt()`.
- `motionctl.eeprom.EEPROMManager`: a little-endian byte image holding PID
  gains, motion profiles, soft limits, system and safety settings and raw
  user data. Values are returned as frozen dataclasses (`PIDParameters`,
  `ProfileParameters`, `SoftLimits`, `SystemConfig`, `SafetyConfig`). With a
  `path`, `initialize()` loads the image from the file and `commit()` writes
  it back. An image without a valid marker is reset to defaults.
  Using the store before `initialize()` raises `EEPROMError`.
- `motionctl.task_scheduler.TaskScheduler`: control and auxiliary tasks run
  when their interval has elapsed, with per-task `TaskStats` and overall
  `SchedulerStats`. Control tasks that run longer than their interval count
  a missed deadline. The microsecond clock can be injected.
- `motionctl.timer_manager.TimerManager`: a fixed set of periodic or one-shot
  timers. A timer's callback runs when `fire()` is called for it; invalid
  indices, intervals or callbacks raise `TimerError`.

## Installing

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Examples

    from motionctl.math_utils import trapezoidal_profile_duration
    print(trapezoidal_profile_duration(1000.0, 100.0, 50.0))   # 12.0

    from motionctl.circular_buffer import CircularBuffer
    samples = CircularBuffer(4)
    for value in (1, 2, 3, 4, 5):
        samples.push(value)
    print(list(samples), samples.average())   # [2, 3, 4, 5] 3.5

    from motionctl.timer_manager import TimerManager
    ticks = []
    timers = TimerManager()
    timers.start_timer(0, 1000, True, lambda: ticks.append(1))
    timers.fire(0)
    timers.fire(0)
    print(len(ticks))   # 2

    from motionctl.eeprom import EEPROMManager
    store = EEPROMManager(path="params.bin")
    store.initialize()
    store.save_pid_parameters(0, 0.5, 0.25, 0.125, 0.0)
    store.commit()
    print(store.load_pid_parameters(0))

    from motionctl.task_scheduler import TaskScheduler
    now = [0]
    scheduler = TaskScheduler(clock=lambda: now[0])
    scheduler.register_control_task(lambda: None, 1000)
    now[0] = 1000
    print(scheduler.execute_control_tasks())   # 1

## What it does not do

- It has no motor driver: nothing here generates step pulses, sets
  direction pins or tracks a motor's position.
- It touches no real hardware. `GPIOManager` only keeps records of pins and
  callbacks, and `TimerManager` timers do not tick by themselves; the caller
  drives them with `fire()`.
- It offers no command-line program, command protocol or serial interface.