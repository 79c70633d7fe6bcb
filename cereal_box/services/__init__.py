from cereal_box.services.counter import VisitorCounterService

__all__ = ["VisitorCounterService"]
