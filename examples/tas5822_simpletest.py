# SPDX-FileCopyrightText: 2026 Your Name
# SPDX-License-Identifier: MIT

"""
TAS5822 Amplifier Sine Wave Example
"""

import array
import math
import time
import audiobusio
import audiocore
import board
import adafruit_logging as logging
from digitalio import DigitalInOut
from circuitpython_tas5822 import TAS5822, ControlState

logger = logging.getLogger("tas5822")
logger.setLevel(logging.ERROR)

# Initialize I2C and TAS5822 amplifier, PDN wired to D9
i2c = board.I2C()
amp = TAS5822(i2c, pdn=DigitalInOut(board.D9), logger=logger)

# Start I2S before begin() so the amp sees a clock when it leaves Hi-Z
audio = audiobusio.I2SOut(board.I2S_BCLK, board.I2S_WS, board.I2S_DIN)

tone_volume = 0.5
frequency = 440
sample_rate = 48000
length = sample_rate // frequency

sine_wave = array.array("h", [0] * length)
for i in range(length):
    sine_wave[i] = int((math.sin(math.pi * 2 * i / length)) * tone_volume * (2**15 - 1))

sine_wave_sample = audiocore.RawSample(sine_wave, sample_rate=sample_rate)
audio.play(sine_wave_sample, loop=True)

if not amp.begin():
    raise RuntimeError(f"TAS5822 initialisation failed at: {amp.failed_step}")
print("Amplifier initialised!")
print(f"Die ID: 0x{amp.die_id:02X}")

time.sleep(0.1)
print(f"Power state: {ControlState.NAMES.get(amp.power_state)}")
print(f"Sample rate: {amp.sample_rate}")

amp.analog_gain = -10.0
amp.digital_volume = -20.0

print(f"Playing {frequency}Hz tone")

while True:
    amp.set_muted(False)
    time.sleep(1)
    amp.set_muted(True)
    time.sleep(1)
    faults = [name for name, active in amp.fault_status.items() if active]
    if faults:
        print(f"Faults: {', '.join(faults)}")
        amp.clear_faults()
