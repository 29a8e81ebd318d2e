"""FastAPI dependency injection utilities."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from clinica.core.config import get_settings
from clinica.services.scheduling import SchedulingService


@lru_cache
def get_scheduling_service() -> SchedulingService:
    """Get the scheduling service configured from settings.

    Cached so the clinic hours file is read once per process.
    """
    return SchedulingService.from_settings(get_settings())


Scheduling = Annotated[SchedulingService, Depends(get_scheduling_service)]
