from typing import Optional

from fastapi import APIRouter, Depends

from cereal_box.api.deps import get_context, get_counter_service
from cereal_box.context import AppContext
from cereal_box.schemas import (
    DatabaseInfo,
    DatabaseResponse,
    GreetingResponse,
    HealthResponse,
    VisitorSnapshot,
    database_status,
)
from cereal_box.services.counter import VisitorCounterService

router = APIRouter()

ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def build_greeting(context: AppContext, snapshot: Optional[VisitorSnapshot]) -> GreetingResponse:
    """Greeting body, degraded to "unavailable" fields without a snapshot."""
    return GreetingResponse(
        visitor_count=snapshot.count if snapshot else "unavailable",
        last_visit=snapshot.last_visit if snapshot else None,
        database=database_status(context.gateway.connected),
        version=context.settings.app_version,
    )


def describe_database(context: AppContext) -> DatabaseInfo:
    gateway = context.gateway
    if not gateway.configured:
        message = "DATABASE_URL not set"
    elif gateway.connected:
        message = "Database connection successful"
    else:
        message = "Database connection failed"

    return DatabaseInfo(
        url="configured" if gateway.configured else "not configured",
        connected=gateway.connected,
        message=message,
    )


def build_degraded(context: AppContext, path: str):
    """Body of the route owning path, with no visitor snapshot."""
    if path == "/health":
        return HealthResponse(database=database_status(context.gateway.connected))
    if path == "/db":
        return DatabaseResponse(database=describe_database(context), visitor=None)
    return build_greeting(context, None)


@router.api_route("/health", methods=ANY_METHOD, response_model=HealthResponse)
async def health_check(context: AppContext = Depends(get_context)):
    """
    Health check endpoint.

    Reports the connection flag kept by the gateway; never touches the counter.
    """
    return HealthResponse(database=database_status(context.gateway.connected))


@router.api_route("/db", methods=ANY_METHOD, response_model=DatabaseResponse)
async def database_check(
    context: AppContext = Depends(get_context),
    counter: VisitorCounterService = Depends(get_counter_service),
):
    """Count a visit and report database configuration and connectivity."""
    snapshot = await counter.record_visit()
    return DatabaseResponse(database=describe_database(context), visitor=snapshot)


@router.api_route("/{path:path}", methods=ANY_METHOD, response_model=GreetingResponse)
async def greeting(
    context: AppContext = Depends(get_context),
    counter: VisitorCounterService = Depends(get_counter_service),
):
    """Greet the visitor. Every path not matched above lands here."""
    snapshot = await counter.record_visit()
    return build_greeting(context, snapshot)
