"""
# ==============================================================================
# Module: phenosim/scoring/organism_matches.py
# ==============================================================================
# Purpose: Hold one organism's best phenotype matches for a query and compute
#          raw similarity statistics for candidate models
#
# Dependencies:
#   - External: None (pure Python)
#   - Internal: phenosim.core.types, phenosim.core.protocols
#
# Input:
#   - Query phenotype terms (ordered)
#   - PhenotypeMatchSourceProtocol: precomputed match table for one organism
#
# Output:
#   - TheoreticalModel: best achievable statistics for the organism
#   - OrganismPhenotypeMatchScore: raw statistics for one model
#
# Design Notes:
#   - Immutable after construction, safe to share between scoring threads
#   - All matches for a query term are retained (ties included)
#   - Lookup index is keyed by both endpoints of every match
#   - A theoretical model with a non-positive value is rejected at
#     construction time
# ==============================================================================
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from phenosim.core.protocols import PhenotypeMatchSourceProtocol
from phenosim.core.types import (
    Organism,
    OrganismPhenotypeMatchScore,
    PhenotypeMatch,
    PhenotypeTerm,
)

logger = logging.getLogger(__name__)


# ==============================================================================
# Theoretical Model
# ==============================================================================
@dataclass(frozen=True)
class TheoreticalModel:
    """
    Best theoretically achievable match statistics for an organism.

    Used only as the normalisation denominator when scoring real models.
    """

    organism: Organism
    max_match_score: float
    best_avg_score: float

    def __post_init__(self):
        if not self.max_match_score > 0:
            raise ValueError(
                f"{self.organism.value} theoretical max match score must be > 0, "
                f"got {self.max_match_score}"
            )
        if not self.best_avg_score > 0:
            raise ValueError(
                f"{self.organism.value} theoretical best average score must be > 0, "
                f"got {self.best_avg_score}"
            )

    @classmethod
    def from_term_matches(
        cls,
        organism: Organism,
        term_phenotype_matches: Mapping[PhenotypeTerm, Sequence[PhenotypeMatch]],
    ) -> "TheoreticalModel":
        """
        Derive the theoretical model from a query term -> matches table.

        max_match_score is the best single score anywhere in the table,
        best_avg_score the mean of each matched query term's best score.
        """
        best_scores = [
            max(match.score for match in matches)
            for matches in term_phenotype_matches.values()
            if matches
        ]
        if not best_scores:
            raise ValueError(
                f"No phenotype matches for any query term in {organism.value}, "
                f"theoretical model is undefined"
            )
        return cls(
            organism=organism,
            max_match_score=max(best_scores),
            best_avg_score=math.fsum(best_scores) / len(best_scores),
        )


# ==============================================================================
# Best Match Trace
# ==============================================================================
@dataclass(frozen=True)
class BestMatchTraceEntry:
    """Best match of one query term, or an unmatched query term."""

    query_term_id: str
    match_term_id: Optional[str] = None
    score: Optional[float] = None

    @property
    def is_matched(self) -> bool:
        return self.match_term_id is not None

    def __str__(self) -> str:
        if not self.is_matched:
            return f"{self.query_term_id}-NOT MATCHED"
        return f"{self.query_term_id}-{self.match_term_id}={self.score}"

    def to_dict(self) -> Dict[str, object]:
        return {
            "queryTermId": self.query_term_id,
            "matchTermId": self.match_term_id,
            "score": self.score,
        }


@dataclass(frozen=True)
class BestMatchTrace:
    """Per-organism summary of best matches, emitted alongside results."""

    organism: Organism
    entries: Tuple[BestMatchTraceEntry, ...]
    theoretical_model: TheoreticalModel

    def to_dict(self) -> Dict[str, object]:
        return {
            "organism": self.organism.value,
            "bestMatches": [e.to_dict() for e in self.entries],
            "bestMaxScore": self.theoretical_model.max_match_score,
            "bestAvgScore": self.theoretical_model.best_avg_score,
        }


# ==============================================================================
# Organism Phenotype Matches
# ==============================================================================
class OrganismPhenotypeMatches:
    """
    Best phenotype matches of a set of query terms within one organism.

    Usage:
        matches = OrganismPhenotypeMatches.from_source(query_terms, mouse_table)
        raw = matches.calculate_model_phenotype_scores(model.phenotype_ids)
    """

    def __init__(
        self,
        organism: Organism,
        term_phenotype_matches: Mapping[PhenotypeTerm, Iterable[PhenotypeMatch]],
    ):
        """
        Args:
            organism: Organism whose vocabulary the matches target
            term_phenotype_matches: Query term -> all its matches. Query terms
                without matches are kept with an empty collection.

        Raises:
            ValueError: if the theoretical model for the organism is undefined
        """
        self._organism = organism

        frozen: Dict[PhenotypeTerm, Tuple[PhenotypeMatch, ...]] = {}
        for term, matches in term_phenotype_matches.items():
            # de-duplicate, keep first-seen order
            frozen[term] = tuple(dict.fromkeys(matches))
        self._term_phenotype_matches = MappingProxyType(frozen)

        self._index = MappingProxyType(self._build_index(frozen))
        self._theoretical_model = TheoreticalModel.from_term_matches(organism, frozen)

        logger.debug(
            f"OrganismPhenotypeMatches built: organism={organism.value}, "
            f"query_terms={len(frozen)}, indexed_terms={len(self._index)}"
        )

    @classmethod
    def from_source(
        cls,
        query_terms: Sequence[PhenotypeTerm],
        source: PhenotypeMatchSourceProtocol,
    ) -> "OrganismPhenotypeMatches":
        """Collect every match for each query term from an external match table."""
        term_matches: Dict[PhenotypeTerm, List[PhenotypeMatch]] = {}
        for term in query_terms:
            if term in term_matches:
                continue
            term_matches[term] = list(source.get_matches_for_query_term(term.id))
        return cls(source.organism, term_matches)

    @staticmethod
    def _build_index(
        term_phenotype_matches: Mapping[PhenotypeTerm, Tuple[PhenotypeMatch, ...]],
    ) -> Dict[str, Tuple[PhenotypeMatch, ...]]:
        index: Dict[str, Dict[PhenotypeMatch, None]] = {}
        for matches in term_phenotype_matches.values():
            for match in matches:
                index.setdefault(match.query_term_id, {})[match] = None
                index.setdefault(match.match_term_id, {})[match] = None
        return {term_id: tuple(matches) for term_id, matches in index.items()}

    # ==========================================================================
    # Accessors
    # ==========================================================================
    @property
    def organism(self) -> Organism:
        return self._organism

    @property
    def term_phenotype_matches(self) -> Mapping[PhenotypeTerm, Tuple[PhenotypeMatch, ...]]:
        return self._term_phenotype_matches

    @property
    def best_theoretical_model(self) -> TheoreticalModel:
        return self._theoretical_model

    @property
    def query_terms(self) -> List[PhenotypeTerm]:
        return list(self._term_phenotype_matches)

    def get_matches_for_term(self, term_id: str) -> Tuple[PhenotypeMatch, ...]:
        """All matches touching term_id at either endpoint."""
        return self._index.get(term_id, ())

    # ==========================================================================
    # Scoring
    # ==========================================================================
    def calculate_model_phenotype_scores(
        self,
        model_phenotype_ids: Iterable[str],
    ) -> OrganismPhenotypeMatchScore:
        """
        Raw similarity statistics of a model's phenotypes against the query.

        Each distinct model phenotype with at least one match contributes its
        best match score to the sum and max. Unmatched phenotypes contribute
        nothing.

        Args:
            model_phenotype_ids: Phenotype annotations of the candidate model

        Returns:
            OrganismPhenotypeMatchScore
        """
        best_scores: List[float] = []
        matching_phenotypes: List[str] = []
        best_matches: List[PhenotypeMatch] = []

        for phenotype_id in dict.fromkeys(model_phenotype_ids):
            matches = self._index.get(phenotype_id)
            if not matches:
                continue
            # max() keeps the first of equal scores
            best_match = max(matches, key=lambda m: m.score)
            best_scores.append(best_match.score)
            matching_phenotypes.append(phenotype_id)
            best_matches.append(best_match)

        if not best_scores:
            return OrganismPhenotypeMatchScore.empty()

        return OrganismPhenotypeMatchScore(
            max_model_match_score=max(best_scores),
            sum_model_best_match_scores=math.fsum(best_scores),
            matching_phenotypes=frozenset(matching_phenotypes),
            best_phenotype_matches=tuple(best_matches),
        )

    # ==========================================================================
    # Trace
    # ==========================================================================
    def best_match_trace(self) -> BestMatchTrace:
        """Best match per query term, in query order."""
        entries = []
        for term, matches in self._term_phenotype_matches.items():
            if not matches:
                entries.append(BestMatchTraceEntry(term.id))
                continue
            best_match = max(matches, key=lambda m: m.score)
            entries.append(
                BestMatchTraceEntry(term.id, best_match.match_term_id, best_match.score)
            )
        return BestMatchTrace(
            organism=self._organism,
            entries=tuple(entries),
            theoretical_model=self._theoretical_model,
        )

    def __repr__(self) -> str:
        return (
            f"OrganismPhenotypeMatches(organism={self._organism.value}, "
            f"query_terms={len(self._term_phenotype_matches)}, "
            f"theoretical_model={self._theoretical_model})"
        )
