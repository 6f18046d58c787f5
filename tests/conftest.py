# SPDX-FileCopyrightText: 2026 Your Name
# SPDX-License-Identifier: MIT

import types

import pytest

from circuitpython_tas5822 import tas5822

ADDRESS = 0x44


class ModelRegister:
    def __init__(self):
        self.value = 0
        self.write_count = 0
        self.read_count = 0


class RegisterModel:
    """Simple model of the TAS5822 register store behind a busio.I2C bus.

    Registers listed in ``fail_writes`` / ``fail_reads`` make the matching
    transaction raise ``OSError``, the way a NACK does on a real bus.
    """

    def __init__(self, address=ADDRESS):
        self.address = address
        self.reset()

    def reset(self):
        self.registers = [ModelRegister() for _ in range(256)]
        self.fail_writes = set()
        self.fail_reads = set()
        self.locked = False
        self.log = []

    # busio.I2C compatible signature

    def try_lock(self):
        if self.locked:
            return False
        self.locked = True
        return True

    def unlock(self):
        self.locked = False

    def _check(self, address):
        assert self.locked, "bus used without lock"
        if address != self.address:
            raise OSError(19, "No such device")

    def writeto(self, address, buffer, *, start=0, end=None):
        self._check(address)
        data = bytes(buffer[start:end])
        if not data:
            return
        reg = data[0]
        if reg in self.fail_writes:
            raise OSError(5, "Input/output error")
        for offset, value in enumerate(data[1:]):
            target = self.registers[(reg + offset) & 0xFF]
            target.value = value
            target.write_count += 1
            self.log.append(("write", (reg + offset) & 0xFF, value))

    def readfrom_into(self, address, buffer, *, start=0, end=None):
        self._check(address)

    def writeto_then_readfrom(
        self,
        address,
        buffer_out,
        buffer_in,
        *,
        out_start=0,
        out_end=None,
        in_start=0,
        in_end=None,
    ):
        self._check(address)
        reg = bytes(buffer_out[out_start:out_end])[0]
        if reg in self.fail_reads:
            raise OSError(5, "Input/output error")
        if in_end is None:
            in_end = len(buffer_in)
        for offset, index in enumerate(range(in_start, in_end)):
            source = self.registers[(reg + offset) & 0xFF]
            source.read_count += 1
            buffer_in[index] = source.value
            self.log.append(("read", (reg + offset) & 0xFF, source.value))

    # management methods

    def set_register(self, reg, value):
        self.registers[reg].value = value

    def value(self, reg):
        return self.registers[reg].value

    def write_count(self, reg):
        return self.registers[reg].write_count

    def total_write_count(self):
        return sum(reg.write_count for reg in self.registers)

    def total_read_count(self):
        return sum(reg.read_count for reg in self.registers)


class FakePin:
    """Records what the driver does to a DigitalInOut."""

    def __init__(self):
        self.events = []
        self._value = None

    def switch_to_output(self, value=False, **kwargs):
        self._value = value
        self.events.append(("output", value))

    @property
    def value(self):
        return self._value

    @value.setter
    def value(self, value):
        self._value = value
        self.events.append(("value", value))


@pytest.fixture
def sleeps(monkeypatch):
    calls = []
    monkeypatch.setattr(tas5822, "time", types.SimpleNamespace(sleep=calls.append))
    return calls


@pytest.fixture
def regmodel():
    return RegisterModel()


@pytest.fixture
def amp(regmodel, sleeps):
    return tas5822.TAS5822(regmodel, ADDRESS)
