#!/usr/bin/env python3
"""
Run script for the FlightDesk dashboard API
"""
import uvicorn

from flightdesk.config.settings import settings
from flightdesk.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
