"""cereal.box visitor counter service."""

__version__ = "1.0.0"
