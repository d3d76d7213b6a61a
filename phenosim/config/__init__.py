"""
phenosim Configuration Module
=============================
Centralized configuration management for scoring and validation.

Module: phenosim/config/__init__.py

Components (re-exported):
    From hyperparameters:
        - ParameterType: Enum for parameter types
        - HyperparameterSpec: Single parameter specification
        - ScoringHyperparameters: Scoring-phase parameters
        - ValidationHyperparameters: Query validation parameters
        - HyperparameterManager: Central parameter manager
        - get_hyperparameter_manager: Get global manager instance

Usage:
    from phenosim.config import get_hyperparameter_manager
    manager = get_hyperparameter_manager()

    manager.load_from_yaml("configs/scoring.yaml")
    pipeline = create_scoring_pipeline(**manager.to_pipeline_config())

Version: 1.0.0
"""

from phenosim.config.hyperparameters import (
    ParameterType,
    HyperparameterSpec,
    ScoringHyperparameters,
    ValidationHyperparameters,
    HyperparameterManager,
    get_hyperparameter_manager,
    reset_hyperparameter_manager,
)


__all__ = [
    # Parameter types
    "ParameterType",
    "HyperparameterSpec",
    # Parameter classes
    "ScoringHyperparameters",
    "ValidationHyperparameters",
    # Manager
    "HyperparameterManager",
    "get_hyperparameter_manager",
    "reset_hyperparameter_manager",
]
