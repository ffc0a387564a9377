import pytest

from motionctl.gpio import GPIOManager, PinAllocation, PinError, PinMode


@pytest.fixture
def gpio():
    return GPIOManager()


def test_allocate_and_query(gpio):
    gpio.allocate_pin(4, PinMode.OUTPUT, "stepper")
    assert not gpio.is_pin_available(4)
    assert gpio.pin_owner(4) == "stepper"
    assert gpio.pin_mode(4) is PinMode.OUTPUT


def test_free_pin_defaults(gpio):
    assert gpio.is_pin_available(7)
    assert gpio.pin_mode(7) is PinMode.INPUT
    assert gpio.pin_owner(7) == ""


def test_conflicting_owner_rejected(gpio):
    gpio.allocate_pin(4, PinMode.OUTPUT, "stepper")
    with pytest.raises(PinError):
        gpio.allocate_pin(4, PinMode.INPUT, "encoder")
    assert gpio.pin_owner(4) == "stepper"


def test_same_owner_may_reconfigure(gpio):
    gpio.allocate_pin(4, PinMode.OUTPUT, "stepper")
    gpio.allocate_pin(4, PinMode.INPUT_PULLUP, "stepper")
    assert gpio.pin_mode(4) is PinMode.INPUT_PULLUP


def test_release_by_wrong_owner_fails(gpio):
    gpio.allocate_pin(4, PinMode.OUTPUT, "stepper")
    with pytest.raises(PinError):
        gpio.release_pin(4, "encoder")
    assert not gpio.is_pin_available(4)


def test_release_unallocated_fails(gpio):
    with pytest.raises(PinError):
        gpio.release_pin(9, "anyone")


def test_released_pin_can_be_taken_by_other(gpio):
    gpio.allocate_pin(4, PinMode.OUTPUT, "stepper")
    gpio.release_pin(4, "stepper")
    assert gpio.is_pin_available(4)
    gpio.allocate_pin(4, PinMode.INPUT, "encoder")
    assert gpio.pin_owner(4) == "encoder"


def test_analog_output_requires_dac_pin(gpio):
    gpio.allocate_pin(25, PinMode.ANALOG_OUTPUT, "dac")
    assert gpio.pin_mode(25) is PinMode.ANALOG_OUTPUT
    with pytest.raises(PinError):
        gpio.allocate_pin(4, PinMode.ANALOG_OUTPUT, "dac")
    assert gpio.is_pin_available(4)


def test_configure_interrupt_rejects_plain_mode(gpio):
    with pytest.raises(ValueError):
        gpio.configure_interrupt(5, PinMode.OUTPUT, lambda: None)


def test_interrupt_trigger_and_disable(gpio):
    calls = []
    gpio.configure_interrupt(5, PinMode.INTERRUPT_RISING, lambda: calls.append(1))
    assert gpio.trigger_interrupt(5) is True
    assert calls == [1]
    gpio.disable_interrupt(5)
    assert gpio.trigger_interrupt(5) is False
    assert calls == [1]


def test_release_interrupt_pin_detaches_handler(gpio):
    calls = []
    gpio.allocate_pin(5, PinMode.INTERRUPT_FALLING, "estop")
    gpio.configure_interrupt(5, PinMode.INTERRUPT_FALLING, lambda: calls.append(1))
    gpio.release_pin(5, "estop")
    assert gpio.trigger_interrupt(5) is False
    assert calls == []


def test_reset_allocations(gpio):
    gpio.allocate_pin(5, PinMode.INTERRUPT_CHANGE, "estop")
    gpio.configure_interrupt(5, PinMode.INTERRUPT_CHANGE, lambda: None)
    gpio.allocate_pin(4, PinMode.OUTPUT, "stepper")
    gpio.reset_allocations()
    assert gpio.allocations() == []
    assert gpio.is_pin_available(4)
    assert gpio.trigger_interrupt(5) is False


def test_allocations_are_copies(gpio):
    gpio.allocate_pin(4, PinMode.OUTPUT, "stepper")
    records = gpio.allocations()
    assert records == [PinAllocation(4, PinMode.OUTPUT, "stepper", True)]
    records[0].owner = "other"
    assert gpio.pin_owner(4) == "stepper"


def test_allocations_keep_released_records(gpio):
    gpio.allocate_pin(4, PinMode.OUTPUT, "stepper")
    gpio.release_pin(4, "stepper")
    records = gpio.allocations()
    assert len(records) == 1
    assert records[0].in_use is False