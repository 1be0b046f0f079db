"""API module initialization."""
from .channels import router as channels_router
from .generation import router as generation_router
from .health import router as health_router

__all__ = ["channels_router", "generation_router", "health_router"]
