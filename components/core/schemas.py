"""Core schemas for the application."""

from typing import List

from pydantic import BaseModel


class HealthCheck(BaseModel):
    """Schema for health check response."""
    service_name: str
    status: str


class Message(BaseModel):
    """Schema for plain acknowledgement and error responses."""
    message: str


class RowError(BaseModel):
    """Schema for a per-row import error."""
    row: int
    message: str


class ImportResponse(BaseModel):
    """Schema for bulk import response."""
    success: bool
    message: str
    imported: int = 0
    errors: List[RowError] = []
