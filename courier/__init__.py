"""Courier: webhook notification broker for ERP modules."""

__version__ = "1.0.0"
