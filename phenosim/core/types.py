"""
phenosim Core Types
===================
統一的資料類型定義，所有模組共享

Phenotype terms, precomputed phenotype matches, candidate models and the
scores produced for them.

版本: 1.0.0
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Dict,
    FrozenSet,
    Generic,
    List,
    Optional,
    Tuple,
    TypeVar,
    Union,
)


# =============================================================================
# Type Variables
# =============================================================================
T = TypeVar("T")


# =============================================================================
# Enums
# =============================================================================
class Organism(str, Enum):
    """
    支援的物種 (用於跨物種表型比對)

    成員順序即為 PhenoGrid 分組的輸出順序
    """
    HUMAN = "human"   # Homo sapiens (NCBI: 9606)
    MOUSE = "mouse"   # Mus musculus (NCBI: 10090)
    FISH = "fish"     # Danio rerio (NCBI: 7955)

    @property
    def taxon_id(self) -> str:
        return _ORGANISM_TAXA[self][0]

    @property
    def species_name(self) -> str:
        return _ORGANISM_TAXA[self][1]

    @classmethod
    def from_string(cls, s: str) -> "Organism":
        """從字串解析 Organism (accepts value, name or NCBI taxon id)"""
        key = s.strip()
        for organism in cls:
            taxon = organism.taxon_id
            if key.lower() in (organism.value, organism.name.lower()) or key in (taxon, taxon.split(":")[1]):
                return organism
        raise ValueError(f"Unknown organism: {s}")


_ORGANISM_TAXA: Dict[Organism, Tuple[str, str]] = {
    Organism.HUMAN: ("NCBITaxon:9606", "Homo sapiens"),
    Organism.MOUSE: ("NCBITaxon:10090", "Mus musculus"),
    Organism.FISH: ("NCBITaxon:7955", "Danio rerio"),
}


class ModelType(str, Enum):
    """
    候選模型類型

    值即為 PhenoGrid 中的 entityType
    """
    DISEASE = "disease"   # Human disease record
    GENE = "gene"         # Model organism gene ortholog


# =============================================================================
# Phenotype Types
# =============================================================================
@dataclass(frozen=True)
class PhenotypeTerm:
    """
    表型詞彙 (HPO / MP / ZP term)

    Identity is by id only; the label is carried for display.
    """
    id: str
    label: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class PhenotypeMatch:
    """
    表型比對結果

    The precomputed best similarity between one query term and one term in a
    target vocabulary.
    """
    query_term_id: str
    match_term_id: str
    match_label: str
    score: float
    query_label: str = field(default="", compare=False)

    def __post_init__(self):
        if not math.isfinite(self.score) or self.score < 0:
            raise ValueError(
                f"PhenotypeMatch score must be finite and >= 0, got {self.score} "
                f"for {self.query_term_id}-{self.match_term_id}"
            )

    @property
    def query_term(self) -> PhenotypeTerm:
        return PhenotypeTerm(self.query_term_id, self.query_label)

    @property
    def match_term(self) -> PhenotypeTerm:
        return PhenotypeTerm(self.match_term_id, self.match_label)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "queryTermId": self.query_term_id,
            "matchTermId": self.match_term_id,
            "matchLabel": self.match_label,
            "score": self.score,
        }


# =============================================================================
# Candidate Models
# =============================================================================
@dataclass(frozen=True)
class DiseaseModel:
    """
    人類疾病模型

    A disease record annotated with HPO phenotypes.
    """
    model_id: str
    organism: Organism
    disease_id: str
    disease_term: str
    phenotype_ids: Tuple[str, ...] = ()

    # Associated human gene (optional)
    human_gene_id: Optional[str] = None
    human_gene_symbol: Optional[str] = None

    model_type: ModelType = field(default=ModelType.DISEASE, init=False)

    def __post_init__(self):
        # Freeze list input
        object.__setattr__(self, "phenotype_ids", tuple(self.phenotype_ids))

    @property
    def label(self) -> str:
        return self.disease_term


@dataclass(frozen=True)
class OrthologModel:
    """
    同源基因模型

    A model organism gene ortholog annotated with organism phenotypes (MP/ZP).
    """
    model_id: str
    organism: Organism
    model_gene_id: str
    model_gene_symbol: str
    phenotype_ids: Tuple[str, ...] = ()

    # Human ortholog (optional)
    human_gene_id: Optional[str] = None
    human_gene_symbol: Optional[str] = None

    model_type: ModelType = field(default=ModelType.GENE, init=False)

    def __post_init__(self):
        object.__setattr__(self, "phenotype_ids", tuple(self.phenotype_ids))

    @property
    def label(self) -> str:
        return self.model_gene_symbol


Model = Union[DiseaseModel, OrthologModel]


# =============================================================================
# Score Types
# =============================================================================
@dataclass(frozen=True)
class OrganismPhenotypeMatchScore:
    """
    模型原始分數

    Raw statistics for one model against one organism's phenotype matches.
    Recomputed on demand, never persisted.
    """
    max_model_match_score: float
    sum_model_best_match_scores: float
    matching_phenotypes: FrozenSet[str] = frozenset()
    best_phenotype_matches: Tuple[PhenotypeMatch, ...] = ()

    @classmethod
    def empty(cls) -> "OrganismPhenotypeMatchScore":
        return cls(0.0, 0.0)


@dataclass(frozen=True)
class ModelPhenotypeMatchScore:
    """
    模型表型比對分數

    The final, comparable score for a model, in [0, 1], with the best
    phenotype matches that explain it.
    """
    score: float
    model: Model
    best_matches: Tuple[PhenotypeMatch, ...] = ()

    def __post_init__(self):
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"Model score must be in [0, 1], got {self.score}")
        object.__setattr__(self, "best_matches", tuple(self.best_matches))

    @property
    def organism(self) -> Organism:
        return self.model.organism

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "modelId": self.model.model_id,
            "organism": self.model.organism.value,
            "entityType": self.model.model_type.value,
            "score": self.score,
            "bestMatches": [m.to_dict() for m in self.best_matches],
        }


# =============================================================================
# Result Wrapper
# =============================================================================
@dataclass
class Result(Generic[T]):
    """
    通用結果包裝器
    用於錯誤處理和狀態傳遞
    """
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, data: T, **metadata) -> "Result[T]":
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(cls, error: str, **metadata) -> "Result[T]":
        return cls(success=False, error=error, metadata=metadata)
