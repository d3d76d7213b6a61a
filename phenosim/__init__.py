"""
phenosim
========
Cross-species phenotype similarity scoring (Phive) and PhenoGrid ranking.

Subpackages:
    - core: shared types and protocols
    - config: hyperparameters (YAML)
    - data_sources: phenotype match tables and candidate models
    - scoring: per-organism match index and Phive model scorer
    - ranking: PhenoGrid grouping and ranking
    - inference: end-to-end scoring pipeline
    - api: FastAPI service
"""

__version__ = "1.0.0"
