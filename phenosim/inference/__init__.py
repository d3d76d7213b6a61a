"""
# ==============================================================================
# Module: phenosim/inference/__init__.py
# ==============================================================================
# Purpose: End-to-end phenotype similarity scoring and ranking
#
# Dependencies:
#   - External: None (pure Python)
#   - Internal: phenosim.core.types, phenosim.scoring, phenosim.ranking
#
# Exports:
#   - ScoringPipeline: Main scoring pipeline
#   - PipelineConfig: Pipeline configuration
#   - ScoringResult: Scores, PhenoGrid and traces of one run
#   - ScoringCancelledError: Raised by a cancelled run
#   - InputValidator: Query validation
#   - ValidationResult: Validation result
#   - create_scoring_pipeline: Factory function
#   - create_input_validator: Factory function
#
# Usage:
#   from phenosim.inference import create_scoring_pipeline
#
#   pipeline = create_scoring_pipeline(max_workers=8)
#   result = pipeline.run(query_terms, match_sources, models)
# ==============================================================================
"""

from phenosim.inference.pipeline import (
    ScoringPipeline,
    PipelineConfig,
    ScoringResult,
    ScoringCancelledError,
    create_scoring_pipeline,
)
from phenosim.inference.input_validator import (
    InputValidator,
    ValidationResult,
    create_input_validator,
)

__all__ = [
    # Pipeline
    "ScoringPipeline",
    "PipelineConfig",
    "ScoringResult",
    "ScoringCancelledError",
    "create_scoring_pipeline",
    # Validation
    "InputValidator",
    "ValidationResult",
    "create_input_validator",
]
