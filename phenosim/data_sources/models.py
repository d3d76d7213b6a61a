"""
Candidate Model Data Source
===========================
候選模型資料庫

Disease models (HPO-annotated human diseases) and ortholog models
(MP/ZP-annotated mouse and zebrafish genes).

Expected TSV format (header required):
    model_type  model_id  organism  entity_id  entity_label  phenotype_ids

- model_type: "disease" or "gene"
- entity_id/entity_label: disease id/name, or model gene id/symbol
- phenotype_ids: ";"-separated phenotype ids
- optional columns: human_gene_id, human_gene_symbol

版本: 1.0.0
"""
from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from phenosim.core.protocols import ModelRepositoryProtocol
from phenosim.core.types import (
    DiseaseModel,
    Model,
    ModelType,
    Organism,
    OrthologModel,
)

logger = logging.getLogger(__name__)


MODEL_TABLE_COLUMNS = (
    "model_type",
    "model_id",
    "organism",
    "entity_id",
    "entity_label",
    "phenotype_ids",
)
PHENOTYPE_ID_SEPARATOR = ";"


# =============================================================================
# Model Construction
# =============================================================================
def make_model(
    model_type: Union[ModelType, str],
    model_id: str,
    organism: Union[Organism, str],
    entity_id: str,
    entity_label: str,
    phenotype_ids: Iterable[str] = (),
    human_gene_id: Optional[str] = None,
    human_gene_symbol: Optional[str] = None,
) -> Model:
    """
    Build a DiseaseModel or OrthologModel from flat fields.

    Raises:
        ValueError: for an unknown model type or organism
    """
    model_type = ModelType(model_type)
    if isinstance(organism, str):
        organism = Organism.from_string(organism)
    phenotype_ids = tuple(phenotype_ids)

    if model_type == ModelType.DISEASE:
        return DiseaseModel(
            model_id=model_id,
            organism=organism,
            disease_id=entity_id,
            disease_term=entity_label,
            phenotype_ids=phenotype_ids,
            human_gene_id=human_gene_id,
            human_gene_symbol=human_gene_symbol,
        )
    return OrthologModel(
        model_id=model_id,
        organism=organism,
        model_gene_id=entity_id,
        model_gene_symbol=entity_label,
        phenotype_ids=phenotype_ids,
        human_gene_id=human_gene_id,
        human_gene_symbol=human_gene_symbol,
    )


# =============================================================================
# Model Repository
# =============================================================================
class ModelRepository(ModelRepositoryProtocol):
    """
    候選模型資料庫

    In-memory, keeps models in the order they were supplied.
    """

    def __init__(self, models: Optional[Iterable[Model]] = None):
        self._models: List[Model] = list(models or ())
        logger.info(f"ModelRepository initialized: models={len(self._models)}")

    def __len__(self) -> int:
        return len(self._models)

    def get_models(self, organism: Optional[Organism] = None) -> List[Model]:
        """獲取候選模型 (可按物種過濾)"""
        if organism is None:
            return list(self._models)
        return [m for m in self._models if m.organism == organism]

    def get_organisms(self) -> List[Organism]:
        """Organisms with at least one model, in Organism order."""
        present = {m.organism for m in self._models}
        return [o for o in Organism if o in present]

    @classmethod
    def from_tsv(cls, file_path: Union[str, Path]) -> "ModelRepository":
        """
        載入 TSV 候選模型

        Rows with an unknown model type or organism are logged and skipped.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Model table not found: {file_path}")

        models = []
        with open(file_path, newline="") as f:
            reader = csv.DictReader(f, delimiter="\t")
            missing = [c for c in MODEL_TABLE_COLUMNS if c not in (reader.fieldnames or [])]
            if missing:
                raise ValueError(f"Missing columns in {file_path}: {missing}")

            for line_no, row in enumerate(reader, start=2):
                try:
                    models.append(cls._parse_row(row))
                except ValueError as e:
                    logger.warning(f"Skipping model row {file_path}:{line_no}: {e}")

        logger.info(f"Loaded {len(models)} models from {file_path}")
        return cls(models)

    @staticmethod
    def _parse_row(row: Dict[str, str]) -> Model:
        phenotype_ids = [
            p.strip()
            for p in (row.get("phenotype_ids") or "").split(PHENOTYPE_ID_SEPARATOR)
            if p.strip()
        ]
        return make_model(
            model_type=(row.get("model_type") or "").strip().lower(),
            model_id=(row.get("model_id") or "").strip(),
            organism=(row.get("organism") or "").strip(),
            entity_id=(row.get("entity_id") or "").strip(),
            entity_label=(row.get("entity_label") or "").strip(),
            phenotype_ids=phenotype_ids,
            human_gene_id=(row.get("human_gene_id") or "").strip() or None,
            human_gene_symbol=(row.get("human_gene_symbol") or "").strip() or None,
        )


# =============================================================================
# Factory Function
# =============================================================================
def create_model_repository(
    file_path: Optional[Union[str, Path]] = None,
    models: Optional[Iterable[Model]] = None,
) -> ModelRepository:
    """
    工廠函數: 創建候選模型資料庫

    Args:
        file_path: TSV file to load, takes precedence over models
        models: In-memory models

    Returns:
        ModelRepository
    """
    if file_path is not None:
        return ModelRepository.from_tsv(file_path)
    return ModelRepository(models)
