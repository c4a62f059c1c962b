"""idd-scaffold: create an initialized npm project from a YAML blueprint."""

__version__ = "1.0.0"
