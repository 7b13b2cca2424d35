"""Visual DeX: camera-driven vocabulary learning with daily missions."""

__version__ = "1.0.0"
