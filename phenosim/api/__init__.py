"""
phenosim API Module
===================
REST API service for phenotype similarity scoring.

Module: phenosim/api/__init__.py

Components:
    - main.py: FastAPI application and lifespan management
    - routes/: Endpoint implementations
        - phenogrid.py: PhenoGrid scoring API
        - config.py: Hyperparameter inspection API

Usage:
    # Run with uvicorn
    uvicorn phenosim.api.main:app --host 0.0.0.0 --port 8000

    # Or use the CLI
    python -m phenosim.api.main

Version: 1.0.0
"""

from phenosim.api.main import app, app_state, get_app_state

__all__ = [
    "app",
    "app_state",
    "get_app_state",
]
