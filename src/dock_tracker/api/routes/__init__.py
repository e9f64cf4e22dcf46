"""Route group exports."""

from . import deliveries, health, reports

__all__ = ["deliveries", "health", "reports"]
