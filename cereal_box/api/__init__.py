from cereal_box.api.routes import router

__all__ = ["router"]
