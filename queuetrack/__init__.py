"""Appointment booking with live per-provider queue tracking."""

__version__ = "0.1.0"
