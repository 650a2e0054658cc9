"""fritzcheck: TR-064 monitoring plugin for FRITZ!Box link statistics."""

__version__ = "0.1.0"
