"""
# ==============================================================================
# Module: phenosim/scoring/__init__.py
# ==============================================================================
# Purpose: Cross-species phenotype similarity scoring
#
# Exports:
#   - OrganismPhenotypeMatches: Best matches of a query within one organism
#   - TheoreticalModel: Best achievable statistics for an organism
#   - BestMatchTrace / BestMatchTraceEntry: Best-match summaries
#   - PhiveModelScorer: Phive combined score for a model
#   - create_model_scorer: Factory function
#
# Usage:
#   from phenosim.scoring import OrganismPhenotypeMatches, PhiveModelScorer
#
#   matches = OrganismPhenotypeMatches.from_source(query_terms, mouse_table)
#   scorer = PhiveModelScorer(matches, num_query_phenotypes=len(query_terms))
#   score = scorer.score_model(model)
# ==============================================================================
"""

from phenosim.scoring.organism_matches import (
    OrganismPhenotypeMatches,
    TheoreticalModel,
    BestMatchTrace,
    BestMatchTraceEntry,
)
from phenosim.scoring.model_scorer import (
    PhiveModelScorer,
    create_model_scorer,
)

__all__ = [
    "OrganismPhenotypeMatches",
    "TheoreticalModel",
    "BestMatchTrace",
    "BestMatchTraceEntry",
    "PhiveModelScorer",
    "create_model_scorer",
]
