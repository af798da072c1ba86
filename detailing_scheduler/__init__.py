"""Dynamic scheduling engine for a vehicle-detailing shop floor."""

__version__ = "1.0.0"
