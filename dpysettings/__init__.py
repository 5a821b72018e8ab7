"""XSETTINGS data, configuration store, X resources, DPI helpers and display layout logic."""

__version__ = "0.1.0"