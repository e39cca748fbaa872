"""
Drivers Under Test
==================

Small peripheral drivers exercised against halmock mocks. They talk to
their buses exactly as they would to CircuitPython busio objects, so the
tests show how a real driver is checked.

Modules:
    haptics: TCA9548A multiplexer and DRV2605 haptic controller (I2C)
    battery: Averaging battery monitor (ADC)
    spi_flash: SPI NOR flash with a chip-select pin

Version: 1.0.0
"""
