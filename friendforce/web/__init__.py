from friendforce.web.routes import router

__all__ = ["router"]
