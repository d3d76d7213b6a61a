"""
# ==============================================================================
# Module: phenosim/scoring/model_scorer.py
# ==============================================================================
# Purpose: Phive scoring of a model's phenotypes against the best theoretical
#          model for a set of query phenotypes in one organism
#
# Dependencies:
#   - External: None (pure Python)
#   - Internal: phenosim.core.types, phenosim.scoring.organism_matches
#
# Input:
#   - OrganismPhenotypeMatches for the organism
#   - Number of query phenotypes
#   - Model: DiseaseModel or OrthologModel
#
# Output:
#   - ModelPhenotypeMatchScore in [0, 1]
#
# Design Notes:
#   - combined = 50 * (max / theoretical_max + avg / theoretical_best_avg)
#   - avg is taken over (num query phenotypes + num matched model phenotypes)
#     which keeps scores consistent across species
#   - combined is capped at 100 but not floored (match scores are >= 0)
#   - Stateless beyond the wrapped references, safe to share between threads
# ==============================================================================
"""
from __future__ import annotations

import logging
from typing import Optional

from phenosim.core.types import (
    Model,
    ModelPhenotypeMatchScore,
    OrganismPhenotypeMatchScore,
)
from phenosim.scoring.organism_matches import OrganismPhenotypeMatches, TheoreticalModel

logger = logging.getLogger(__name__)


MAX_COMBINED_SCORE = 100.0


class PhiveModelScorer:
    """
    Phive scorer for one organism and one query.

    Usage:
        # single species (HP-HP) or single cross-species (HP-MP)
        scorer = PhiveModelScorer(mouse_matches, num_query_phenotypes=5)

        # multi cross-species, compared against one benchmark organism
        scorer = PhiveModelScorer(
            mouse_matches,
            num_query_phenotypes=5,
            theoretical_model=human_matches.best_theoretical_model,
        )
        score = scorer.score_model(model)
    """

    def __init__(
        self,
        organism_phenotype_matches: OrganismPhenotypeMatches,
        num_query_phenotypes: int,
        theoretical_model: Optional[TheoreticalModel] = None,
    ):
        """
        Args:
            organism_phenotype_matches: Best phenotype matches for this organism
            num_query_phenotypes: Number of query phenotypes, must be > 0
            theoretical_model: Model against which all models are compared.
                Defaults to the organism's own best theoretical model.
        """
        if num_query_phenotypes <= 0:
            raise ValueError(
                f"num_query_phenotypes must be > 0, got {num_query_phenotypes}"
            )
        theoretical_model = theoretical_model or organism_phenotype_matches.best_theoretical_model

        self.organism_phenotype_matches = organism_phenotype_matches
        self.num_query_phenotypes = num_query_phenotypes
        self.theoretical_max_match_score = theoretical_model.max_match_score
        self.theoretical_best_avg_score = theoretical_model.best_avg_score

    @property
    def organism(self):
        return self.organism_phenotype_matches.organism

    def score_model(self, model: Model) -> ModelPhenotypeMatchScore:
        """
        Score a model against the query phenotypes.

        Args:
            model: Candidate disease or ortholog model

        Returns:
            ModelPhenotypeMatchScore with the best matches used for scoring
        """
        raw_model_score = self.organism_phenotype_matches.calculate_model_phenotype_scores(
            model.phenotype_ids
        )
        score = self.calculate_combined_score(raw_model_score)
        logger.debug(
            f"Scored {model.model_type.value} model {model.model_id}: "
            f"max={raw_model_score.max_model_match_score}, "
            f"sum={raw_model_score.sum_model_best_match_scores}, "
            f"matched={len(raw_model_score.matching_phenotypes)}, score={score}"
        )
        return ModelPhenotypeMatchScore(
            score=score,
            model=model,
            best_matches=raw_model_score.best_phenotype_matches,
        )

    def calculate_combined_score(self, raw_model_score: OrganismPhenotypeMatchScore) -> float:
        """Combine raw model statistics into a normalised score in [0, 1]."""
        max_model_match_score = raw_model_score.max_model_match_score
        sum_model_best_match_scores = raw_model_score.sum_model_best_match_scores
        num_matching_phenotypes = len(raw_model_score.matching_phenotypes)

        if sum_model_best_match_scores <= 0:
            return 0.0

        total_phenotypes_with_match = self.num_query_phenotypes + num_matching_phenotypes
        model_best_avg_score = sum_model_best_match_scores / total_phenotypes_with_match

        combined_score = 50 * (
            max_model_match_score / self.theoretical_max_match_score
            + model_best_avg_score / self.theoretical_best_avg_score
        )
        if combined_score > MAX_COMBINED_SCORE:
            combined_score = MAX_COMBINED_SCORE
        return combined_score / MAX_COMBINED_SCORE

    def __repr__(self) -> str:
        return (
            f"PhiveModelScorer(theoretical_max_match_score={self.theoretical_max_match_score}, "
            f"theoretical_best_avg_score={self.theoretical_best_avg_score}, "
            f"organism_phenotype_matches={self.organism_phenotype_matches!r}, "
            f"num_query_phenotypes={self.num_query_phenotypes})"
        )


# ==============================================================================
# Factory Function
# ==============================================================================
def create_model_scorer(
    organism_phenotype_matches: OrganismPhenotypeMatches,
    num_query_phenotypes: int,
    theoretical_model: Optional[TheoreticalModel] = None,
) -> PhiveModelScorer:
    """
    Factory function to create a PhiveModelScorer.

    Args:
        organism_phenotype_matches: Best phenotype matches for this organism
        num_query_phenotypes: Number of query phenotypes
        theoretical_model: Optional benchmark theoretical model

    Returns:
        Configured PhiveModelScorer instance
    """
    return PhiveModelScorer(
        organism_phenotype_matches,
        num_query_phenotypes,
        theoretical_model=theoretical_model,
    )
