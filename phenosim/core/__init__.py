"""
phenosim Core Module
====================
核心模組，包含所有 Protocol 定義和共享類型

所有其他模組都應依賴此模組以獲取接口契約

使用方式:
    from phenosim.core import PhenotypeTerm, PhenotypeMatch, DiseaseModel
    from phenosim.core import PhenotypeMatchSourceProtocol, ModelScorerProtocol
"""

# Core Types
from phenosim.core.types import (
    # Enums
    Organism,
    ModelType,
    # Data Classes
    PhenotypeTerm,
    PhenotypeMatch,
    DiseaseModel,
    OrthologModel,
    Model,
    OrganismPhenotypeMatchScore,
    ModelPhenotypeMatchScore,
    # Utilities
    Result,
)

# Protocols
from phenosim.core.protocols import (
    PhenotypeMatchSourceProtocol,
    ModelRepositoryProtocol,
    ModelScorerProtocol,
    ScoringPipelineProtocol,
)

__all__ = [
    # === Enums ===
    "Organism",
    "ModelType",
    # === Data Classes ===
    "PhenotypeTerm",
    "PhenotypeMatch",
    "DiseaseModel",
    "OrthologModel",
    "Model",
    "OrganismPhenotypeMatchScore",
    "ModelPhenotypeMatchScore",
    # === Utilities ===
    "Result",
    # === Protocols ===
    "PhenotypeMatchSourceProtocol",
    "ModelRepositoryProtocol",
    "ModelScorerProtocol",
    "ScoringPipelineProtocol",
]
