"""Two-pump well-to-cistern controller with sensor, timer and manual modes, modelled in memory."""

__version__ = "0.1.0"