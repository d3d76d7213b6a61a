"""
# ==============================================================================
# Module: phenosim/inference/pipeline.py
# ==============================================================================
# Purpose: End-to-end phenotype similarity scoring and ranking of candidate
#          disease and ortholog models
#
# Dependencies:
#   - External: None (pure Python)
#   - Internal: phenosim.core, phenosim.scoring, phenosim.ranking,
#               phenosim.inference.input_validator
#
# Input:
#   - Query phenotype terms (HPO)
#   - Per-organism phenotype match sources (HP-HP, HP-MP, HP-ZP)
#   - Candidate models (DiseaseModel / OrthologModel)
#
# Output:
#   - ScoringResult: model scores, PhenoGrid, best-match traces, warnings
#
# Design Notes:
#   - Phase 1 (may read external sources): validate query, build one
#     OrganismPhenotypeMatches + PhiveModelScorer per organism
#   - Phase 2 (no I/O): fan out scoring over a thread pool, fan in in input
#     order, then group and rank
#   - Cancellation is checked between models only; a cancelled run publishes
#     nothing
#   - Organisms without a usable theoretical model get no scorer, their
#     models are skipped with a warning
#
# Usage:
#   from phenosim.inference import create_scoring_pipeline
#
#   pipeline = create_scoring_pipeline(max_workers=8)
#   result = pipeline.run(query_terms, {Organism.MOUSE: mouse_table}, models)
#   payload = result.phenogrid.to_dict()
# ==============================================================================
"""
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from phenosim.core.protocols import PhenotypeMatchSourceProtocol
from phenosim.core.types import (
    Model,
    ModelPhenotypeMatchScore,
    Organism,
    PhenotypeTerm,
    Result,
)
from phenosim.inference.input_validator import InputValidator
from phenosim.ranking.phenogrid import DEFAULT_GRID_ID, PhenoGrid, PhenoGridBuilder
from phenosim.scoring.model_scorer import PhiveModelScorer
from phenosim.scoring.organism_matches import BestMatchTrace, OrganismPhenotypeMatches

logger = logging.getLogger(__name__)


class ScoringCancelledError(RuntimeError):
    """Raised when a scoring run is cancelled before all models were scored."""


# ==============================================================================
# Configuration
# ==============================================================================
@dataclass
class PipelineConfig:
    """Configuration for the scoring pipeline."""

    # Concurrency: 1 scores sequentially in the calling thread
    max_workers: int = 4

    # Organisms
    enabled_organisms: List[str] = field(
        default_factory=lambda: [o.value for o in Organism]
    )
    # When set, every organism is normalised by this organism's theoretical
    # model (multi cross-species comparison)
    benchmark_organism: Optional[str] = None

    # Output control
    include_trace: bool = True
    grid_id: str = DEFAULT_GRID_ID

    # Validation
    strict_hpo_format: bool = False
    min_phenotypes: int = 1

    def __post_init__(self):
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        self.enabled = [Organism.from_string(o) for o in self.enabled_organisms]
        self.benchmark = (
            Organism.from_string(self.benchmark_organism)
            if self.benchmark_organism else None
        )


# ==============================================================================
# Result Types
# ==============================================================================
@dataclass
class ScoringResult:
    """Complete scoring result."""

    query_terms: List[PhenotypeTerm]
    model_scores: List[ModelPhenotypeMatchScore]
    phenogrid: PhenoGrid
    timestamp: datetime
    traces: List[BestMatchTrace] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    scoring_time_ms: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "queryTerms": [{"id": t.id, "label": t.label} for t in self.query_terms],
            "phenogrid": self.phenogrid.to_dict(),
            "traces": [t.to_dict() for t in self.traces],
            "warnings": list(self.warnings),
            "scoringTimeMs": self.scoring_time_ms,
        }


# ==============================================================================
# Scoring Pipeline
# ==============================================================================
class ScoringPipeline:
    """
    Phenotype similarity scoring pipeline.

    Scores every candidate model against the query phenotypes with the Phive
    algorithm of its organism, then groups and ranks the scores into a
    PhenoGrid.

    Usage:
        pipeline = ScoringPipeline()
        result = pipeline.run(query_terms, match_sources, models)
    """

    VERSION = "1.0.0"

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()
        self.validator = InputValidator(
            strict_hpo_format=self.config.strict_hpo_format,
            min_phenotypes=self.config.min_phenotypes,
        )
        self.grid_builder = PhenoGridBuilder(grid_id=self.config.grid_id)

        logger.info(
            f"ScoringPipeline initialized: version={self.VERSION}, "
            f"max_workers={self.config.max_workers}, "
            f"organisms={[o.value for o in self.config.enabled]}, "
            f"benchmark={self.config.benchmark.value if self.config.benchmark else None}"
        )

    # ==========================================================================
    # Main Entry Point
    # ==========================================================================
    def run(
        self,
        query_terms: Sequence[PhenotypeTerm],
        match_sources: Mapping[Organism, PhenotypeMatchSourceProtocol],
        models: Sequence[Model],
        cancel_event: Optional[threading.Event] = None,
    ) -> ScoringResult:
        """
        Score, group and rank candidate models.

        Args:
            query_terms: Query phenotype terms
            match_sources: Phenotype match table per organism
            models: Candidate models of any organism
            cancel_event: Optional event; when set, scoring stops before the
                next model and ScoringCancelledError is raised

        Returns:
            ScoringResult

        Raises:
            ValueError: if the query has no valid phenotypes
            ScoringCancelledError: if cancel_event was set during scoring
        """
        start_time = time.time()

        validation = self.validate_input(query_terms)
        if not validation.success:
            logger.error(f"Input validation failed: {validation.error}")
            raise ValueError(f"Invalid query phenotypes: {validation.error}")
        terms: List[PhenotypeTerm] = validation.data
        warnings: List[str] = list(validation.warnings)

        # Phase 1: build scorers (may touch external sources)
        organisms = self._select_organisms(match_sources, models)
        scorers, traces, scorer_warnings = self.build_scorers(terms, match_sources, organisms)
        warnings.extend(scorer_warnings)

        # Phase 2: fan out / fan in
        scorable = [m for m in models if m.organism in scorers]
        skipped = len(models) - len(scorable)
        if skipped:
            warnings.append(f"{skipped} model(s) skipped: no scorer for their organism")

        model_scores = self.score_models(scorers, scorable, cancel_event)

        phenogrid = self.grid_builder.build([t.id for t in terms], model_scores)

        scoring_time_ms = (time.time() - start_time) * 1000
        logger.info(
            f"Scoring complete: query_terms={len(terms)}, "
            f"models_scored={len(model_scores)}, skipped={skipped}, "
            f"groups={len(phenogrid.groups)}, time={scoring_time_ms:.1f}ms"
        )

        return ScoringResult(
            query_terms=terms,
            model_scores=model_scores,
            phenogrid=phenogrid,
            timestamp=datetime.now(),
            traces=traces if self.config.include_trace else [],
            warnings=warnings,
            scoring_time_ms=scoring_time_ms,
        )

    # ==========================================================================
    # Input Validation
    # ==========================================================================
    def validate_input(self, query_terms: Sequence[PhenotypeTerm]) -> Result[List[PhenotypeTerm]]:
        """Validate query phenotypes."""
        validation = self.validator.validate_query(query_terms)
        if not validation.is_valid:
            result = Result.fail("; ".join(validation.errors) or "no valid phenotypes")
            result.warnings = validation.warnings
            return result
        result = Result.ok(validation.validated_terms)
        result.warnings = validation.warnings
        return result

    # ==========================================================================
    # Scorer Construction
    # ==========================================================================
    def _select_organisms(
        self,
        match_sources: Mapping[Organism, PhenotypeMatchSourceProtocol],
        models: Sequence[Model],
    ) -> List[Organism]:
        """Enabled organisms with a match source and at least one model."""
        with_models = {m.organism for m in models}
        return [
            o for o in Organism
            if o in self.config.enabled and o in match_sources and o in with_models
        ]

    def build_scorers(
        self,
        query_terms: Sequence[PhenotypeTerm],
        match_sources: Mapping[Organism, PhenotypeMatchSourceProtocol],
        organisms: Sequence[Organism],
    ) -> Tuple[Dict[Organism, PhiveModelScorer], List[BestMatchTrace], List[str]]:
        """
        Build one PhiveModelScorer per organism.

        Organisms whose theoretical model is undefined get no scorer.

        Returns:
            (scorers by organism, best-match traces, warnings)
        """
        warnings: List[str] = []
        organism_matches: Dict[Organism, OrganismPhenotypeMatches] = {}

        to_build = list(organisms)
        benchmark = self.config.benchmark
        if benchmark is not None and benchmark not in to_build and benchmark in match_sources:
            to_build.append(benchmark)

        for organism in to_build:
            try:
                organism_matches[organism] = OrganismPhenotypeMatches.from_source(
                    query_terms, match_sources[organism]
                )
            except ValueError as e:
                logger.warning(f"No scorer for {organism.value}: {e}")
                warnings.append(f"No scorer for {organism.value}: {e}")

        theoretical_model = None
        if benchmark is not None:
            if benchmark in organism_matches:
                theoretical_model = organism_matches[benchmark].best_theoretical_model
            else:
                warnings.append(
                    f"Benchmark organism {benchmark.value} unavailable, "
                    f"each organism uses its own theoretical model"
                )

        scorers: Dict[Organism, PhiveModelScorer] = {}
        traces: List[BestMatchTrace] = []
        for organism in organisms:
            matches = organism_matches.get(organism)
            if matches is None:
                continue
            scorers[organism] = PhiveModelScorer(
                matches,
                num_query_phenotypes=len(dict.fromkeys(t.id for t in query_terms)),
                theoretical_model=theoretical_model,
            )
            trace = matches.best_match_trace()
            self._log_trace(trace)
            traces.append(trace)

        return scorers, traces, warnings

    @staticmethod
    def _log_trace(trace: BestMatchTrace) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return
        logger.debug(f"Best {trace.organism.value} phenotype matches:")
        for entry in trace.entries:
            logger.debug(str(entry))
        logger.debug(
            f"bestMaxScore={trace.theoretical_model.max_match_score} "
            f"bestAvgScore={trace.theoretical_model.best_avg_score}"
        )

    # ==========================================================================
    # Scoring
    # ==========================================================================
    def score_models(
        self,
        scorers: Mapping[Organism, PhiveModelScorer],
        models: Sequence[Model],
        cancel_event: Optional[threading.Event] = None,
    ) -> List[ModelPhenotypeMatchScore]:
        """
        Score models with their organism's scorer.

        Returns scores in the same order as models.
        """
        def score_one(model: Model) -> Optional[ModelPhenotypeMatchScore]:
            if cancel_event is not None and cancel_event.is_set():
                return None
            return scorers[model.organism].score_model(model)

        if self.config.max_workers == 1 or len(models) <= 1:
            scores = []
            for model in models:
                score = score_one(model)
                if score is None:
                    break
                scores.append(score)
        else:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                scores = list(executor.map(score_one, models))

        if len(scores) < len(models) or any(s is None for s in scores):
            logger.warning(f"Scoring cancelled after {sum(s is not None for s in scores)} models")
            raise ScoringCancelledError("Scoring run was cancelled")

        return scores

    # ==========================================================================
    # Introspection
    # ==========================================================================
    def get_pipeline_config(self) -> Dict[str, Any]:
        """Get pipeline configuration as a dict."""
        return {
            "version": self.VERSION,
            **asdict(self.config),
        }


# ==============================================================================
# Factory Function
# ==============================================================================
def create_scoring_pipeline(
    config: Optional[PipelineConfig] = None,
    **kwargs,
) -> ScoringPipeline:
    """
    Factory function to create a ScoringPipeline.

    Args:
        config: Pipeline configuration (takes precedence over kwargs)
        **kwargs: PipelineConfig fields

    Returns:
        Configured ScoringPipeline instance
    """
    if config is None:
        config = PipelineConfig(**kwargs)
    return ScoringPipeline(config=config)
