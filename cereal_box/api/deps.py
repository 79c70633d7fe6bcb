from fastapi import Depends, Request

from cereal_box.context import AppContext
from cereal_box.services.counter import VisitorCounterService


def get_context(request: Request) -> AppContext:
    """Get the application context attached at startup."""
    return request.app.state.context


def get_counter_service(context: AppContext = Depends(get_context)) -> VisitorCounterService:
    return context.counter
