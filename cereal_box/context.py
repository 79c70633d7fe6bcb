"""Application context shared by the router and the lifespan handler."""

import enum
from dataclasses import dataclass, field

from cereal_box.config import Settings
from cereal_box.database import DatabaseGateway
from cereal_box.services.counter import VisitorCounterService


class LifecycleState(str, enum.Enum):
    STARTING = "starting"
    LISTENING = "listening"
    DRAINING = "draining"
    STOPPED = "stopped"


@dataclass
class AppContext:
    settings: Settings
    gateway: DatabaseGateway
    counter: VisitorCounterService
    state: LifecycleState = field(default=LifecycleState.STARTING)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        gateway = DatabaseGateway(
            settings.database_url,
            connect_timeout=settings.connect_timeout_seconds,
            echo=settings.debug,
        )
        return cls(
            settings=settings,
            gateway=gateway,
            counter=VisitorCounterService(gateway),
        )
