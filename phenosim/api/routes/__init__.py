"""
phenosim API Routes
===================
Route modules for the REST API.

Module: phenosim/api/routes/__init__.py

Routes:
    - phenogrid: PhenoGrid scoring endpoint
    - config: Hyperparameter inspection endpoint

Version: 1.0.0
"""

from phenosim.api.routes import config, phenogrid

__all__ = [
    "config",
    "phenogrid",
]
