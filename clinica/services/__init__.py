"""Business logic services."""

from clinica.services.scheduling import SchedulingService

__all__ = ["SchedulingService"]
