from .router import api_router, register_error_handlers

__all__ = ["api_router", "register_error_handlers"]
