"""domain-access - domain-based access rule for view displays."""

__all__ = ["__version__"]
__version__ = "0.1.0"
