"""
phenosim Config API Routes
==========================
REST endpoint for hyperparameter inspection.

Module: phenosim/api/routes/config.py

Purpose:
    - GET /config: hyperparameter specs, current values and pipeline config

Dependencies:
    - fastapi: Router
    - phenosim.config: HyperparameterManager

Version: 1.0.0
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter

from phenosim.config import get_hyperparameter_manager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/config")
async def get_config() -> Dict[str, Any]:
    """
    Get scoring configuration.

    Returns hyperparameter specs grouped by category, current values, and
    the configuration of the active pipeline (if built).
    """
    from phenosim.api.main import app_state

    manager = app_state.hyperparameters or get_hyperparameter_manager()
    return {
        "specs": {
            "scoring": manager.get_specs_by_category("scoring"),
            "validation": manager.get_specs_by_category("validation"),
        },
        "values": manager.get_current_values(),
        "pipeline": (
            app_state.pipeline.get_pipeline_config()
            if app_state.pipeline is not None else None
        ),
    }
