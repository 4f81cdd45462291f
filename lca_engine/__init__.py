"""Impact calculation and ISO 14044 interpretation engine for product LCAs."""

__version__ = "0.1.0"
