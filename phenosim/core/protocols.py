"""
phenosim Protocol Definitions
=============================
所有模組的接口契約 (Protocol)

設計原則:
1. 外部協作者 (match tables, model repositories) 只需實現對應的 Protocol
2. Protocol 定義輸入/輸出類型，確保模組間相容
3. 使用 typing.Protocol 實現結構性子類型 (structural subtyping)

版本: 1.0.0
"""
from __future__ import annotations

import threading
from typing import (
    Any,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)

from phenosim.core.types import (
    Model,
    ModelPhenotypeMatchScore,
    Organism,
    PhenotypeMatch,
    PhenotypeTerm,
)


# =============================================================================
# Data Source Protocols
# =============================================================================
@runtime_checkable
class PhenotypeMatchSourceProtocol(Protocol):
    """
    表型比對表協議

    一個物種的預先計算表型相似度表，可由任一端點查詢

    實現模組: phenosim/data_sources/phenotype_matches.py
    """

    @property
    def organism(self) -> Organism:
        """目標物種"""
        ...

    def get_matches_for_query_term(self, term_id: str) -> List[PhenotypeMatch]:
        """
        獲取查詢詞彙的所有比對

        Args:
            term_id: Query phenotype id (e.g. HP:0001250)

        Returns:
            Matches in table order (may be empty)
        """
        ...

    def get_matches_for_term(self, term_id: str) -> List[PhenotypeMatch]:
        """獲取任一端點等於 term_id 的所有比對"""
        ...


@runtime_checkable
class ModelRepositoryProtocol(Protocol):
    """
    候選模型資料庫協議

    實現模組: phenosim/data_sources/models.py
    """

    def get_models(self, organism: Optional[Organism] = None) -> List[Model]:
        """獲取候選模型 (可按物種過濾)"""
        ...


# =============================================================================
# Scoring Protocols
# =============================================================================
@runtime_checkable
class ModelScorerProtocol(Protocol):
    """
    模型評分器協議

    實現模組: phenosim/scoring/model_scorer.py
    """

    def score_model(self, model: Model) -> ModelPhenotypeMatchScore:
        """
        計算模型與查詢表型的相似度分數

        Returns:
            Score in [0, 1] with best-match evidence
        """
        ...


# =============================================================================
# Pipeline Protocols
# =============================================================================
@runtime_checkable
class ScoringPipelineProtocol(Protocol):
    """
    評分管線協議

    實現模組: phenosim/inference/pipeline.py
    """

    def run(
        self,
        query_terms: Sequence[PhenotypeTerm],
        match_sources: Mapping[Organism, PhenotypeMatchSourceProtocol],
        models: Sequence[Model],
        cancel_event: Optional[threading.Event] = None,
    ) -> Any:
        """執行完整評分與排序"""
        ...

    def get_pipeline_config(self) -> Dict[str, Any]:
        """獲取管線配置"""
        ...
