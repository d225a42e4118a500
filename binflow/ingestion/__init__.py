"""
Data Ingestion Module
"""
from .seed_db import seed_demo_data

__all__ = [
    "seed_demo_data",
]
