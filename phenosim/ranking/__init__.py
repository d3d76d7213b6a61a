"""
# ==============================================================================
# Module: phenosim/ranking/__init__.py
# ==============================================================================
# Purpose: Ranking and grouping of scored models for presentation
#
# Exports:
#   - PhenoGridBuilder: Groups, sorts and ranks model scores
#   - PhenoGrid, PhenoGridMatchGroup, PhenoGridMatch, PhenoGridMatchTaxon
#   - create_phenogrid_builder: Factory function
#   - to_integer_score: 0-100 integer scaling of a [0, 1] score
# ==============================================================================
"""

from phenosim.ranking.phenogrid import (
    DEFAULT_GRID_ID,
    PhenoGrid,
    PhenoGridBuilder,
    PhenoGridMatch,
    PhenoGridMatchGroup,
    PhenoGridMatchTaxon,
    create_phenogrid_builder,
    to_integer_score,
)

__all__ = [
    "DEFAULT_GRID_ID",
    "PhenoGrid",
    "PhenoGridBuilder",
    "PhenoGridMatch",
    "PhenoGridMatchGroup",
    "PhenoGridMatchTaxon",
    "create_phenogrid_builder",
    "to_integer_score",
]
