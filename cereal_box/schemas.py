"""Pydantic schemas for JSON responses."""

from datetime import datetime, timezone
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DatabaseStatus = Literal["connected", "disconnected"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Serializes field names in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VisitorSnapshot(CamelModel):
    """Counter values returned by an increment."""

    count: int = Field(..., ge=0)
    last_visit: datetime


class HealthResponse(CamelModel):
    status: Literal["healthy"] = "healthy"
    database: DatabaseStatus
    timestamp: datetime = Field(default_factory=utcnow)


class DatabaseInfo(CamelModel):
    url: Literal["configured", "not configured"]
    connected: bool
    message: str


class DatabaseResponse(CamelModel):
    database: DatabaseInfo
    visitor: Optional[VisitorSnapshot] = None
    timestamp: datetime = Field(default_factory=utcnow)


class GreetingResponse(CamelModel):
    message: str = "Hello from cereal.box!"
    visitor_count: Union[int, Literal["unavailable"]] = "unavailable"
    last_visit: Optional[datetime] = None
    database: DatabaseStatus
    version: str
    timestamp: datetime = Field(default_factory=utcnow)


def database_status(connected: bool) -> DatabaseStatus:
    return "connected" if connected else "disconnected"
