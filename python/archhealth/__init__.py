"""Architecture health scoring and trend forecasting."""

__version__ = "1.0.0"
