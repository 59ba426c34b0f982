"""Employee, pay group, disbursement and pay entry API."""

__version__ = "0.1.0"
