"""
Client Module
"""
from .production import ProductionClient
from .polling import SmartPoller, select_poll_interval

__all__ = [
    "ProductionClient",
    "SmartPoller",
    "select_poll_interval",
]
