"""Schema for the health endpoint."""

from pydantic import BaseModel


class HealthRead(BaseModel):
    status: str
    scheduler_running: bool


__all__ = ["HealthRead"]
