"""fleetform: schema-driven configuration forms for fleet-manager plugins."""

__version__ = "0.1.0"
