"""Chiptheory - musical structure from NES APU oscillator period dumps."""

__version__ = "0.1.0"
