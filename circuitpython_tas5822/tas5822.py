# SPDX-FileCopyrightText: 2026 Your Name
# SPDX-License-Identifier: MIT

"""
`tas5822`
================================================================================

CircuitPython driver for the TAS5822 I2S class-D amplifier


* Author(s): Your Name

Implementation Notes
--------------------

**Hardware:**

* TAS5822 digital input stereo class-D amplifier

**Software and Dependencies:**

* Adafruit CircuitPython firmware for the supported boards:
  https://circuitpython.org/downloads

* Required Libraries:
  - adafruit_bus_device
  - adafruit_register

"""

import time

from adafruit_bus_device.i2c_device import I2CDevice
from adafruit_register.i2c_bit import RWBit, ROBit
from adafruit_register.i2c_bits import ROBits
from adafruit_register.i2c_struct import ROUnaryStruct
from micropython import const

__version__ = "0.0.0+auto.0"
__repo__ = "https://github.com/yourrepo/CircuitPython_TAS5822.git"

_DEFAULT_ADDRESS = const(0x2C)

_MUTE_BIT = const(3)
_CTRL_STATE_MASK = const(0x03)
_AGAIN_MASK = const(0x1F)

_MIN_ANALOG_GAIN = -15.5
_MAX_ANALOG_GAIN = 0.0

# DIG_VOL: 0x00 = +24 dB, 0xFE = -103 dB, 0xFF = hard mute
_MAX_DIGITAL_VOLUME = 24.0
_MIN_DIGITAL_VOLUME = -103.0
_DIG_VOL_MUTE = const(0xFF)

_ANALOG_FAULT_CLEAR = const(0x80)


class Register:
    """Register addresses as per datasheet."""

    RESET_CTRL = const(0x01)
    DEVICE_CTRL_1 = const(0x02)
    DEVICE_CTRL_2 = const(0x03)
    I2C_PAGE_AUTO_INC = const(0x0F)
    SIG_CH_CTRL = const(0x28)
    CLOCK_DET_CTRL = const(0x29)
    SDOUT_SEL = const(0x30)
    I2S_CTRL = const(0x31)
    SAP_CTRL1 = const(0x33)
    SAP_CTRL2 = const(0x34)
    SAP_CTRL3 = const(0x35)
    FS_MON = const(0x37)
    BCK_MON = const(0x38)
    CLKDET_STATUS = const(0x39)
    DIG_VOL = const(0x4C)
    DIG_VOL_CTRL1 = const(0x4E)
    DIG_VOL_CTRL2 = const(0x4F)
    AUTO_MUTE_CTRL = const(0x50)
    AUTO_MUTE_TIME = const(0x51)
    AMUTE_DELAY = const(0x52)
    ANA_CTRL = const(0x53)
    AGAIN = const(0x54)
    BQ_WR_CTRL1 = const(0x5C)
    DAC_CTRL = const(0x5D)
    ADR_PIN_CTRL = const(0x60)
    ADR_PIN_CONFIG = const(0x61)
    DSP_MISC = const(0x66)
    DIE_ID = const(0x67)
    POWER_STATE = const(0x68)
    AUTOMUTE_STATE = const(0x69)
    PHASE_CTRL = const(0x6A)
    SS_CTRL0 = const(0x6B)
    SS_CTRL1 = const(0x6C)
    SS_CTRL2 = const(0x6D)
    SS_CTRL3 = const(0x6E)
    SS_CTRL4 = const(0x6F)
    CHAN_FAULT = const(0x70)
    GLOBAL_FAULT1 = const(0x71)
    GLOBAL_FAULT2 = const(0x72)
    OT_WARNING = const(0x73)
    PIN_CONTROL1 = const(0x74)
    PIN_CONTROL2 = const(0x75)
    FAULT_CLEAR = const(0x78)


class ControlState:
    """Device control states, bits 1:0 of DEVICE_CTRL_2."""

    DEEP_SLEEP = const(0x00)
    SLEEP = const(0x01)
    HIGH_Z = const(0x02)
    PLAY = const(0x03)

    NAMES = {
        DEEP_SLEEP: "Deep Sleep",
        SLEEP: "Sleep",
        HIGH_Z: "Hi-Z",
        PLAY: "Play",
    }


# Raw register writes at the start of begin(): (step name, register, value, hold ms)
INIT_SEQUENCE = (
    ("DSP Reset + HighZ + Mute", Register.DEVICE_CTRL_2, 0b00011010, 5),
    ("Reset Digital Core + Reset Registers", Register.RESET_CTRL, 0b00010001, 5),
    ("DSP Normal + HighZ + Mute", Register.DEVICE_CTRL_2, 0b00001010, 0),
    # I2S, 16-bit
    ("Audio Format", Register.SAP_CTRL1, 0x00, 0),
)

# FS_MON bits 3:0
_SAMPLE_RATES = {
    0b0010: 8000,
    0b0100: 16000,
    0b0110: 32000,
    0b1001: 48000,
    0b1011: 96000,
}


def analog_gain_code(gain):
    """Convert analog gain in dBFS to the AGAIN register code.

    The register holds attenuation in 0.5 dB steps, so -15.5 dBFS is 31 and
    0 dBFS is 0. Half steps round away from zero.

    :param float gain: Gain in dBFS, clamped to -15.5 to 0
    :return: AGAIN code, 0 to 31
    """
    if not isinstance(gain, (int, float)):
        raise TypeError(f"Gain must be a number, not {type(gain).__name__}")
    gain = max(_MIN_ANALOG_GAIN, min(_MAX_ANALOG_GAIN, gain))
    return int(-2.0 * gain + 0.5)


class TAS5822:
    """
    Driver for the TAS5822 I2S amplifier.

    Output is MUTED after :meth:`begin`. Call ``set_muted(False)`` to unmute.

    The driver does not coordinate with other bus masters. Each
    read-modify-write holds the bus lock across its read and its write, so
    drivers sharing the same ``busio.I2C`` object cannot interleave with it.

    :param ~busio.I2C i2c_bus: The I2C bus the device is connected to
    :param int address: The I2C device address. Defaults to :const:`0x2C`
    :param ~digitalio.DigitalInOut pdn: Optional power down pin, pulsed by :meth:`begin`
    :param logger: Optional logger for initialisation failures
    """

    # AUTO_MUTE_CTRL
    auto_mute_left = RWBit(Register.AUTO_MUTE_CTRL, 0)
    """Enable automute on the left channel"""

    auto_mute_right = RWBit(Register.AUTO_MUTE_CTRL, 1)
    """Enable automute on the right channel"""

    die_id = ROUnaryStruct(Register.DIE_ID, "B")
    """Die identification byte"""

    # POWER_STATE (Read-Only)
    _power_state = ROBits(2, Register.POWER_STATE, 0)

    # FS_MON (Read-Only)
    _fs_mon = ROBits(4, Register.FS_MON, 0)

    # CHAN_FAULT (Read-Only)
    _ch1_dc_fault = ROBit(Register.CHAN_FAULT, 3)
    _ch2_dc_fault = ROBit(Register.CHAN_FAULT, 2)
    _ch1_oc_fault = ROBit(Register.CHAN_FAULT, 1)
    _ch2_oc_fault = ROBit(Register.CHAN_FAULT, 0)

    # GLOBAL_FAULT1 / GLOBAL_FAULT2 / OT_WARNING (Read-Only)
    _clock_fault = ROBit(Register.GLOBAL_FAULT1, 2)
    _pvdd_ov_fault = ROBit(Register.GLOBAL_FAULT1, 1)
    _pvdd_uv_fault = ROBit(Register.GLOBAL_FAULT1, 0)
    _otsd_fault = ROBit(Register.GLOBAL_FAULT2, 0)
    _ot_warning = ROBit(Register.OT_WARNING, 2)

    def __init__(
        self,
        i2c_bus,
        address=_DEFAULT_ADDRESS,
        *,
        pdn=None,
        logger=None,
    ):
        self.i2c_device = I2CDevice(i2c_bus, address)
        self._pdn = pdn
        self._logger = logger
        self.failed_step = None
        self._buffer = bytearray(2)

    def set_logging_output(self, logger):
        """Set a target for debug log messages.

        If not set, no log messages are written. Anything with an ``error``
        method taking a format string works, e.g. an ``adafruit_logging`` logger.

        :param logger: Logger to write to, or None to disable
        """
        self._logger = logger

    def _log(self, msg):
        if self._logger is not None:
            self._logger.error("TAS5822: %s", msg)

    def _fail(self, step):
        self.failed_step = step
        self._log("Failed to set: " + step)
        return False

    def begin(self):
        """Initialise the TAS5822 and leave it in a playing state.

        Output is MUTED by default and the analog gain is at its lowest level.

        :return: True if initialisation completed successfully
        """
        self.failed_step = None

        if self._pdn is not None:
            self._pdn.switch_to_output(value=False)
            time.sleep(0.010)
            self._pdn.value = True
            time.sleep(0.010)

        for step, register, value, hold_ms in INIT_SEQUENCE:
            if not self.write_register(register, value):
                return self._fail(step)
            if hold_ms:
                time.sleep(hold_ms / 1000)

        if not self.set_muted(True):
            return self._fail("Muted")

        if not self.set_control_state(ControlState.PLAY):
            return self._fail("Playing")

        if not self.set_analog_gain(_MIN_ANALOG_GAIN):
            return self._fail("Analog Gain")

        return True

    def write_register(self, register, value):
        """Write an 8-bit value to a register.

        :param int register: Register to write to
        :param int value: Value to write
        :return: True if the I2C transaction completed successfully
        """
        self._buffer[0] = register
        self._buffer[1] = value & 0xFF
        try:
            with self.i2c_device as i2c:
                i2c.write(self._buffer)
        except OSError:
            return False
        return True

    def read_register(self, register):
        """Read an 8-bit value from a register.

        :param int register: Register to read from
        :return: Register value, or None if the I2C transaction failed
        """
        buf = bytearray(1)
        try:
            with self.i2c_device as i2c:
                i2c.write_then_readinto(bytes([register]), buf)
        except OSError:
            return None
        return buf[0]

    def _update_bits(self, register, mask, value):
        # bus stays locked between the read and the write
        buf = bytearray(1)
        try:
            with self.i2c_device as i2c:
                i2c.write_then_readinto(bytes([register]), buf)
                i2c.write(bytes([register, (buf[0] & ~mask & 0xFF) | (value & mask)]))
        except OSError:
            return False
        return True

    def set_analog_gain(self, gain):
        """Set analog gain.

        :param float gain: Gain to be applied (-15.5 to 0 dBFS)
        :return: True if the I2C transaction completed successfully
        """
        return self.write_register(Register.AGAIN, analog_gain_code(gain))

    def set_muted(self, muted):
        """Enable/disable soft-mute.

        :param bool muted: Muted if True, unmuted if False
        :return: True if the I2C transactions completed successfully
        """
        return self._update_bits(
            Register.DEVICE_CTRL_2, 1 << _MUTE_BIT, int(bool(muted)) << _MUTE_BIT
        )

    def set_control_state(self, state):
        """Set the current control state.

        :param int state: State, such as ``ControlState.PLAY``, ``ControlState.SLEEP``
        :return: True if the I2C transactions completed successfully
        """
        if (
            isinstance(state, bool)
            or not isinstance(state, int)
            or state not in ControlState.NAMES
        ):
            raise ValueError(f"Invalid control state: {state!r}")
        return self._update_bits(Register.DEVICE_CTRL_2, _CTRL_STATE_MASK, state)

    def get_control_state(self):
        """Get the current control state.

        :return: Control state, such as ``ControlState.PLAY``, or None if the read failed
        """
        value = self.read_register(Register.DEVICE_CTRL_2)
        if value is None:
            return None
        return value & _CTRL_STATE_MASK

    @property
    def control_state(self):
        """Get/set the control state requested in DEVICE_CTRL_2"""
        return self.get_control_state()

    @control_state.setter
    def control_state(self, state):
        if not self.set_control_state(state):
            raise OSError("Failed to set control state")

    @property
    def muted(self):
        """Whether soft-mute is enabled, or None if the read failed"""
        value = self.read_register(Register.DEVICE_CTRL_2)
        if value is None:
            return None
        return bool(value & (1 << _MUTE_BIT))

    @property
    def analog_gain(self):
        """Get/set the analog gain in dBFS (-15.5 to 0)"""
        value = self.read_register(Register.AGAIN)
        if value is None:
            return None
        return -(value & _AGAIN_MASK) / 2

    @analog_gain.setter
    def analog_gain(self, gain):
        if not self.set_analog_gain(gain):
            raise OSError("Failed to set analog gain")

    @property
    def digital_volume(self):
        """Get/set the digital volume in dB (+24 to -103, 0.5 dB steps).

        Reads as ``-inf`` when the register is at hard mute.
        """
        value = self.read_register(Register.DIG_VOL)
        if value is None:
            return None
        if value == _DIG_VOL_MUTE:
            return float("-inf")
        return _MAX_DIGITAL_VOLUME - value / 2

    @digital_volume.setter
    def digital_volume(self, db):
        if not isinstance(db, (int, float)):
            raise TypeError(f"Volume must be a number, not {type(db).__name__}")
        db = max(_MIN_DIGITAL_VOLUME, min(_MAX_DIGITAL_VOLUME, db))
        if not self.write_register(Register.DIG_VOL, int((_MAX_DIGITAL_VOLUME - db) * 2 + 0.5)):
            raise OSError("Failed to set digital volume")

    @property
    def power_state(self):
        """Control state reported by the device, such as ``ControlState.PLAY``"""
        return self._power_state

    @property
    def sample_rate(self):
        """Detected I2S sample rate in Hz, or None if not detected"""
        return _SAMPLE_RATES.get(self._fs_mon)

    @property
    def fault_status(self):
        """Current fault status

        :return: Dictionary with channel, supply, clock and thermal fault flags
        :rtype: dict
        """
        return {
            "left_dc_fault": self._ch1_dc_fault,
            "right_dc_fault": self._ch2_dc_fault,
            "left_overcurrent": self._ch1_oc_fault,
            "right_overcurrent": self._ch2_oc_fault,
            "clock_fault": self._clock_fault,
            "pvdd_overvoltage": self._pvdd_ov_fault,
            "pvdd_undervoltage": self._pvdd_uv_fault,
            "overtemperature_shutdown": self._otsd_fault,
            "overtemperature_warning": self._ot_warning,
        }

    def clear_faults(self):
        """Clear latched analog faults

        :return: True if the I2C transaction completed successfully
        """
        return self.write_register(Register.FAULT_CLEAR, _ANALOG_FAULT_CLEAR)

    def deinit(self):
        """Mute the output and put the device into deep sleep

        :return: True if the I2C transactions completed successfully
        """
        if not self.set_muted(True):
            return False
        return self.set_control_state(ControlState.DEEP_SLEEP)
