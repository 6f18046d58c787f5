# SPDX-FileCopyrightText: 2026 Your Name
# SPDX-License-Identifier: MIT

"""
`circuitpython_tas5822`
================================================================================

CircuitPython driver for the TAS5822 I2S amplifier


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

__version__ = "0.0.0+auto.0"
__repo__ = "https://github.com/yourrepo/CircuitPython_TAS5822.git"

from .tas5822 import (
    INIT_SEQUENCE,
    TAS5822,
    ControlState,
    Register,
    analog_gain_code,
)

__all__ = [
    'TAS5822',
    'ControlState',
    'Register',
    'INIT_SEQUENCE',
    'analog_gain_code',
]
