"""
phenosim Data Sources Module
============================
資料來源整合模組

外部協作者的檔案實作:
- Phenotype match tables: HP-HP, HP-MP, HP-ZP best matches
- Candidate models: human diseases, mouse and zebrafish orthologs

使用方式:
    from phenosim.data_sources import create_match_table, create_model_repository

    mouse_table = create_match_table("mouse", "data/hp_mp_matches.tsv")
    repository = create_model_repository("data/models.tsv")
"""

from phenosim.core.protocols import (
    PhenotypeMatchSourceProtocol,
    ModelRepositoryProtocol,
)
from phenosim.data_sources.phenotype_matches import (
    PhenotypeMatchTable,
    create_match_table,
)
from phenosim.data_sources.models import (
    ModelRepository,
    create_model_repository,
    make_model,
)

__all__ = [
    # Protocols (for type hints)
    "PhenotypeMatchSourceProtocol",
    "ModelRepositoryProtocol",
    # Implementations
    "PhenotypeMatchTable",
    "ModelRepository",
    # Factories
    "create_match_table",
    "create_model_repository",
    "make_model",
]
