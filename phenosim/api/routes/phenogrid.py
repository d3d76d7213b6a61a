"""
phenosim PhenoGrid API Routes
=============================
REST endpoint for phenotype similarity scoring.

Module: phenosim/api/routes/phenogrid.py

Purpose:
    - POST /phenogrid: score candidate models against query phenotypes and
      return them grouped by organism and ranked

Dependencies:
    - fastapi: Router, request/response models
    - pydantic: Request validation
    - phenosim.inference.pipeline: ScoringPipeline
    - phenosim.data_sources: match tables and model construction

Input:
    - PhenoGridRequest: query terms, per-organism phenotype matches,
      candidate models

Output:
    - PhenoGridResponse: PhenoGrid, model scores, traces, warnings

Version: 1.0.0
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from phenosim.core.types import Organism, PhenotypeMatch, PhenotypeTerm
from phenosim.data_sources import create_match_table, make_model

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================
class PhenotypeTermIn(BaseModel):
    """Query phenotype term"""

    id: str = Field(..., description="HPO term ID (e.g., 'HP:0001250')")
    label: str = Field(default="", description="Term label")


class PhenotypeMatchIn(BaseModel):
    """Precomputed best match between a query term and an organism term"""

    query_id: str = Field(..., description="Query HPO term ID")
    query_label: str = Field(default="", description="Query term label")
    match_id: str = Field(..., description="Matched term ID (HP/MP/ZP)")
    match_label: str = Field(default="", description="Matched term label")
    score: float = Field(..., ge=0.0, description="Similarity score")


class ModelIn(BaseModel):
    """Candidate disease or ortholog model"""

    model_type: Literal["disease", "gene"] = Field(..., description="Model type")
    model_id: str = Field(..., description="Unique model identifier")
    organism: str = Field(..., description="Organism name or NCBI taxon ID")
    entity_id: str = Field(..., description="Disease ID or model gene ID")
    entity_label: str = Field(default="", description="Disease term or gene symbol")
    phenotype_ids: List[str] = Field(default_factory=list, description="Annotated phenotype IDs")
    human_gene_id: Optional[str] = Field(default=None, description="Associated human gene ID")
    human_gene_symbol: Optional[str] = Field(default=None, description="Associated human gene symbol")

    model_config = {"protected_namespaces": ()}


class PhenoGridRequest(BaseModel):
    """PhenoGrid scoring request"""

    query_terms: List[PhenotypeTermIn] = Field(
        ...,
        min_length=1,
        description="Query phenotype terms",
    )
    phenotype_matches: Dict[str, List[PhenotypeMatchIn]] = Field(
        ...,
        description="Phenotype matches keyed by organism (e.g., 'mouse')",
    )
    models: List[ModelIn] = Field(..., description="Candidate models")
    include_trace: bool = Field(default=False, description="Include best-match traces")

    model_config = {"json_schema_extra": {
        "example": {
            "query_terms": [{"id": "HP:0001250", "label": "Seizure"}],
            "phenotype_matches": {
                "mouse": [{
                    "query_id": "HP:0001250",
                    "match_id": "MP:0002064",
                    "match_label": "seizures",
                    "score": 2.5,
                }],
            },
            "models": [{
                "model_type": "gene",
                "model_id": "MGI:98297_1",
                "organism": "mouse",
                "entity_id": "MGI:98297",
                "entity_label": "Scn1a",
                "phenotype_ids": ["MP:0002064"],
            }],
        }
    }}


class PhenoGridResponse(BaseModel):
    """PhenoGrid scoring response"""

    session_id: str = Field(..., description="Unique session identifier")
    timestamp: str = Field(..., description="ISO timestamp")
    phenogrid: Dict[str, Any] = Field(..., description="Grouped and ranked matches")
    model_scores: List[Dict[str, Any]] = Field(..., description="Scores in request order")
    traces: Optional[List[Dict[str, Any]]] = Field(None, description="Best-match traces per organism")
    scoring_time_ms: float = Field(..., description="Processing time in milliseconds")
    warnings: List[str] = Field(default_factory=list, description="Any warnings")

    model_config = {"protected_namespaces": ()}


# =============================================================================
# Endpoints
# =============================================================================
@router.post("/phenogrid", response_model=PhenoGridResponse)
def score_phenogrid(request: PhenoGridRequest) -> PhenoGridResponse:
    """
    Score candidate models and build the PhenoGrid

    Scores every model against the query with its organism's Phive scorer,
    then groups by organism and ranks by descending score.
    """
    from phenosim.api.main import initialize_pipeline

    session_id = f"sess_{uuid.uuid4().hex[:12]}"
    logger.info(
        f"PhenoGrid request: session={session_id}, "
        f"query_terms={len(request.query_terms)}, models={len(request.models)}"
    )

    pipeline = initialize_pipeline()

    query_terms = [PhenotypeTerm(t.id, t.label) for t in request.query_terms]
    match_sources = {}
    for organism_name, rows in request.phenotype_matches.items():
        organism = Organism.from_string(organism_name)
        match_sources[organism] = create_match_table(
            organism,
            matches=[
                PhenotypeMatch(
                    query_term_id=row.query_id,
                    match_term_id=row.match_id,
                    match_label=row.match_label,
                    score=row.score,
                    query_label=row.query_label,
                )
                for row in rows
            ],
        )
    models = [
        make_model(
            model_type=m.model_type,
            model_id=m.model_id,
            organism=m.organism,
            entity_id=m.entity_id,
            entity_label=m.entity_label,
            phenotype_ids=m.phenotype_ids,
            human_gene_id=m.human_gene_id,
            human_gene_symbol=m.human_gene_symbol,
        )
        for m in request.models
    ]

    result = pipeline.run(query_terms, match_sources, models)

    return PhenoGridResponse(
        session_id=session_id,
        timestamp=datetime.now().isoformat(),
        phenogrid=result.phenogrid.to_dict(),
        model_scores=[s.to_dict() for s in result.model_scores],
        traces=[t.to_dict() for t in result.traces] if request.include_trace else None,
        scoring_time_ms=result.scoring_time_ms,
        warnings=result.warnings,
    )
