"""Pump model selection and motor supply checks (backend only)."""

__version__ = "0.1.0"
