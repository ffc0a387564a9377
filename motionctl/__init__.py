"""Motion-control building blocks: timers, scheduling, GPIO allocation, storage, logging and math."""

__version__ = "0.1.0"

__all__ = [
    "circular_buffer",
    "math_utils",
    "logger",
    "gpio",
    "eeprom",
    "task_scheduler",
    "timer_manager",
]