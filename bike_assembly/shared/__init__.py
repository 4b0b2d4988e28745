"""Shared kernel: base classes, clock sources, locks and the error taxonomy."""
