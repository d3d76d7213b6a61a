"""
# ==============================================================================
# Module: phenosim/ranking/phenogrid.py
# ==============================================================================
# Purpose: Rank and group scored models into a PhenoGrid for presentation
#
# Dependencies:
#   - External: None (pure Python)
#   - Internal: phenosim.core.types
#
# Input:
#   - Query phenotype term ids
#   - ModelPhenotypeMatchScore sequence (any organisms, any order)
#
# Output:
#   - PhenoGrid: query term ids + one ranked group per organism
#
# Design Notes:
#   - Groups follow Organism enum order, empty groups are omitted
#   - Descending sort by score is stable, equal scores keep input order
#   - Ranks are 0-based and assigned after sorting
#   - to_dict() emits the camelCase field names consumed by the grid viewer
# ==============================================================================
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from phenosim.core.types import (
    DiseaseModel,
    ModelPhenotypeMatchScore,
    ModelType,
    Organism,
    OrthologModel,
    PhenotypeMatch,
)

logger = logging.getLogger(__name__)


DEFAULT_GRID_ID = "hiPhive"


# ==============================================================================
# PhenoGrid Data Structures
# ==============================================================================
@dataclass(frozen=True)
class PhenoGridMatchTaxon:
    """Organism taxon of a match group."""

    id: str
    label: str

    @classmethod
    def of(cls, organism: Organism) -> "PhenoGridMatchTaxon":
        return cls(organism.taxon_id, organism.species_name)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label}


@dataclass(frozen=True)
class PhenoGridMatch:
    """A single ranked entity in a match group."""

    entity_id: str
    entity_label: str
    entity_type: str  # "disease" or "gene"
    phenotype_matches: Tuple[PhenotypeMatch, ...]
    integer_score: int
    rank: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entityId": self.entity_id,
            "entityLabel": self.entity_label,
            "entityType": self.entity_type,
            "phenotypeMatches": [m.to_dict() for m in self.phenotype_matches],
            "integerScore": self.integer_score,
            "rank": self.rank,
        }


@dataclass(frozen=True)
class PhenoGridMatchGroup:
    """Ranked matches of one organism."""

    organism_taxon: PhenoGridMatchTaxon
    matches: Tuple[PhenoGridMatch, ...]
    score_method: str = DEFAULT_GRID_ID

    def to_dict(self) -> Dict[str, Any]:
        return {
            "organismTaxon": self.organism_taxon.to_dict(),
            "scoreMethod": self.score_method,
            "matches": [m.to_dict() for m in self.matches],
        }


@dataclass(frozen=True)
class PhenoGrid:
    """Query term ids plus ranked, grouped matches."""

    id: str
    query_term_ids: Tuple[str, ...]
    groups: Tuple[PhenoGridMatchGroup, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "queryTermIds": list(self.query_term_ids),
            "groups": [g.to_dict() for g in self.groups],
        }


# ==============================================================================
# Builder
# ==============================================================================
def to_integer_score(score: float) -> int:
    """Scale a [0, 1] score to 0-100, rounding halves up."""
    return int(math.floor(score * 100 + 0.5))


class PhenoGridBuilder:
    """
    Build a PhenoGrid from model scores.

    Usage:
        builder = PhenoGridBuilder()
        grid = builder.build(query_term_ids, model_scores)
        payload = grid.to_dict()
    """

    def __init__(self, grid_id: str = DEFAULT_GRID_ID):
        self.grid_id = grid_id

    def build(
        self,
        query_term_ids: Iterable[str],
        model_scores: Iterable[ModelPhenotypeMatchScore],
    ) -> PhenoGrid:
        """
        Args:
            query_term_ids: Query phenotype ids, kept in order, duplicates dropped
            model_scores: Scored models of any organism

        Returns:
            PhenoGrid
        """
        query_ids = tuple(dict.fromkeys(query_term_ids))

        by_organism: Dict[Organism, List[ModelPhenotypeMatchScore]] = {
            organism: [] for organism in Organism
        }
        for model_score in model_scores:
            by_organism[model_score.organism].append(model_score)

        groups = []
        for organism, organism_scores in by_organism.items():
            if not organism_scores:
                continue
            groups.append(self.make_match_group(organism, organism_scores))

        logger.debug(
            f"Built PhenoGrid {self.grid_id}: query_terms={len(query_ids)}, "
            f"groups={[g.organism_taxon.label for g in groups]}"
        )
        return PhenoGrid(id=self.grid_id, query_term_ids=query_ids, groups=tuple(groups))

    def make_match_group(
        self,
        organism: Organism,
        model_scores: Sequence[ModelPhenotypeMatchScore],
    ) -> PhenoGridMatchGroup:
        """Sort one organism's scores (stable, descending) and rank them from 0."""
        ranked = sorted(model_scores, key=lambda s: s.score, reverse=True)
        matches = tuple(
            self._make_match(model_score, rank) for rank, model_score in enumerate(ranked)
        )
        return PhenoGridMatchGroup(
            organism_taxon=PhenoGridMatchTaxon.of(organism),
            matches=matches,
            score_method=self.grid_id,
        )

    def _make_match(self, model_score: ModelPhenotypeMatchScore, rank: int) -> PhenoGridMatch:
        model = model_score.model
        if model.model_type == ModelType.DISEASE:
            entity_id, entity_label = self._disease_entity(model)
        elif model.model_type == ModelType.GENE:
            entity_id, entity_label = self._gene_entity(model)
        else:
            raise ValueError(f"Unsupported model type: {model.model_type}")

        return PhenoGridMatch(
            entity_id=entity_id,
            entity_label=entity_label,
            entity_type=model.model_type.value,
            phenotype_matches=model_score.best_matches,
            integer_score=to_integer_score(model_score.score),
            rank=rank,
        )

    @staticmethod
    def _disease_entity(model: DiseaseModel) -> Tuple[str, str]:
        return model.disease_id, model.disease_term

    @staticmethod
    def _gene_entity(model: OrthologModel) -> Tuple[str, str]:
        return model.model_gene_id, model.model_gene_symbol


# ==============================================================================
# Factory Function
# ==============================================================================
def create_phenogrid_builder(grid_id: str = DEFAULT_GRID_ID) -> PhenoGridBuilder:
    """Factory function to create a PhenoGridBuilder."""
    return PhenoGridBuilder(grid_id=grid_id)
