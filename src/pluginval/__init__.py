"""pluginval — layered-architecture validator for markdown plugin packages."""

__version__ = "0.1.0"
