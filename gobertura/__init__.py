"""gobertura — convert Go cover profiles into Cobertura coverage reports."""

__version__ = "1.0.0"
