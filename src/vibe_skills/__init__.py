"""Install, update and remove Claude skills from a skills registry."""

__version__ = "0.1.0"
