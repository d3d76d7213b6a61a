"""
Phenotype Match Table Data Source
=================================
預先計算的表型相似度表

Holds the precomputed best term-to-term similarity matches between the query
vocabulary (HPO) and one organism's vocabulary (HPO, MP or ZP). The table is
produced elsewhere and is only read here.

Expected TSV format (header required):
    query_id  query_label  match_id  match_label  score

版本: 1.0.0
"""
from __future__ import annotations

import csv
import logging
import math
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from phenosim.core.protocols import PhenotypeMatchSourceProtocol
from phenosim.core.types import Organism, PhenotypeMatch

logger = logging.getLogger(__name__)


MATCH_TABLE_COLUMNS = ("query_id", "query_label", "match_id", "match_label", "score")


# =============================================================================
# Phenotype Match Table
# =============================================================================
class PhenotypeMatchTable(PhenotypeMatchSourceProtocol):
    """
    表型比對表

    Read-only after construction and queryable by either endpoint.
    """

    def __init__(
        self,
        organism: Organism,
        matches: Optional[Iterable[PhenotypeMatch]] = None,
    ):
        self._organism = organism
        self._matches: List[PhenotypeMatch] = []
        self._by_query_term: Dict[str, List[PhenotypeMatch]] = {}
        self._by_term: Dict[str, List[PhenotypeMatch]] = {}

        for match in dict.fromkeys(matches or ()):
            self._matches.append(match)
            self._by_query_term.setdefault(match.query_term_id, []).append(match)
            self._by_term.setdefault(match.query_term_id, []).append(match)
            if match.match_term_id != match.query_term_id:
                self._by_term.setdefault(match.match_term_id, []).append(match)

        logger.info(
            f"PhenotypeMatchTable initialized: organism={organism.value}, "
            f"matches={len(self._matches)}, query_terms={len(self._by_query_term)}"
        )

    @property
    def organism(self) -> Organism:
        return self._organism

    def __len__(self) -> int:
        return len(self._matches)

    def __iter__(self):
        return iter(self._matches)

    # =========================================================================
    # Queries
    # =========================================================================
    def get_matches_for_query_term(self, term_id: str) -> List[PhenotypeMatch]:
        """
        獲取查詢詞彙的所有比對

        Args:
            term_id: Query phenotype id (e.g. HP:0001250)

        Returns:
            Matches in table order, empty if the term is not in the table
        """
        return list(self._by_query_term.get(term_id, ()))

    def get_matches_for_term(self, term_id: str) -> List[PhenotypeMatch]:
        """
        獲取任一端點等於 term_id 的所有比對

        Example:
            >>> table.get_matches_for_term("MP:0001399")
            [PhenotypeMatch(query_term_id='HP:0000752', match_term_id='MP:0001399', ...)]
        """
        return list(self._by_term.get(term_id, ()))

    # =========================================================================
    # Loading
    # =========================================================================
    @classmethod
    def from_tsv(cls, organism: Organism, file_path: Union[str, Path]) -> "PhenotypeMatchTable":
        """
        載入 TSV 表型比對表

        Rows with a missing id or an invalid score are logged and skipped.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Phenotype match table not found: {file_path}")

        matches = []
        skipped = 0
        with open(file_path, newline="") as f:
            reader = csv.DictReader(f, delimiter="\t")
            missing = [c for c in MATCH_TABLE_COLUMNS if c not in (reader.fieldnames or [])]
            if missing:
                raise ValueError(f"Missing columns in {file_path}: {missing}")

            for line_no, row in enumerate(reader, start=2):
                match = cls._parse_row(row)
                if match is None:
                    logger.warning(f"Skipping malformed match row {file_path}:{line_no}: {row}")
                    skipped += 1
                    continue
                matches.append(match)

        logger.info(f"Loaded {len(matches)} matches from {file_path} (skipped {skipped})")
        return cls(organism, matches)

    @staticmethod
    def _parse_row(row: Dict[str, str]) -> Optional[PhenotypeMatch]:
        query_id = (row.get("query_id") or "").strip()
        match_id = (row.get("match_id") or "").strip()
        if not query_id or not match_id:
            return None
        try:
            score = float(row.get("score") or "")
        except ValueError:
            return None
        if not math.isfinite(score) or score < 0:
            return None
        return PhenotypeMatch(
            query_term_id=query_id,
            match_term_id=match_id,
            match_label=(row.get("match_label") or "").strip(),
            score=score,
            query_label=(row.get("query_label") or "").strip(),
        )


# =============================================================================
# Factory Function
# =============================================================================
def create_match_table(
    organism: Union[Organism, str],
    file_path: Optional[Union[str, Path]] = None,
    matches: Optional[Iterable[PhenotypeMatch]] = None,
) -> PhenotypeMatchTable:
    """
    工廠函數: 創建表型比對表

    Args:
        organism: Organism (or its name) the matches target
        file_path: TSV file to load, takes precedence over matches
        matches: In-memory matches

    Returns:
        PhenotypeMatchTable
    """
    if isinstance(organism, str):
        organism = Organism.from_string(organism)
    if file_path is not None:
        return PhenotypeMatchTable.from_tsv(organism, file_path)
    return PhenotypeMatchTable(organism, matches)
