"""FastAPI routers for the dashboard API."""

from . import dashboard, flights, funds, session

__all__ = ["dashboard", "flights", "funds", "session"]
