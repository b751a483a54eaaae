"""API routers for Storygrid."""

from . import storyboard

__all__ = ["storyboard"]
