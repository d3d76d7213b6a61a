"""
# ==============================================================================
# Module: phenosim/inference/input_validator.py
# ==============================================================================
# Purpose: Validate query phenotypes before scoring
#
# Dependencies:
#   - External: None (pure Python)
#   - Internal: phenosim.core.types
#
# Input:
#   - Query phenotype terms (HPO)
#
# Output:
#   - ValidationResult: Validation status with warnings/errors
#
# Design Notes:
#   - A query without phenotypes is always invalid (the per-model average
#     would have no denominator)
#   - Every supplied term is kept: a non-HPO id only adds a warning, the
#     match tables decide what it matches
#   - Repeated ids collapse to their first occurrence, term identity is by id
#   - Returns results instead of raising, the pipeline decides what to do
# ==============================================================================
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import List, Sequence, Set

from phenosim.core.types import PhenotypeTerm

logger = logging.getLogger(__name__)


# ==============================================================================
# Validation Result
# ==============================================================================
@dataclass
class ValidationResult:
    """Result of input validation."""

    is_valid: bool
    validated_terms: List[PhenotypeTerm] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def validated_phenotypes(self) -> List[str]:
        return [t.id for t in self.validated_terms]

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.is_valid


# ==============================================================================
# Input Validator
# ==============================================================================
class InputValidator:
    """
    Validates query phenotypes for the scoring pipeline.

    Performs:
    - Format checks (HPO ID format, warning only)
    - Duplicate detection
    - Count checks

    Usage:
        validator = InputValidator()
        result = validator.validate_query(query_terms)
        if result.is_valid:
            # proceed with scoring
    """

    # HPO ID pattern: HP:XXXXXXX (7 digits)
    HPO_PATTERN = re.compile(r"^HP:\d{7}$")

    # Alternate pattern for flexibility
    HPO_PATTERN_FLEXIBLE = re.compile(r"^HP:\d{4,7}$")

    def __init__(
        self,
        strict_hpo_format: bool = False,
        min_phenotypes: int = 1,
    ):
        """
        Initialize validator.

        Args:
            strict_hpo_format: Expect exactly 7 digits in HPO IDs
            min_phenotypes: Minimum required distinct phenotypes (at least 1)
        """
        self.strict_hpo_format = strict_hpo_format
        self.min_phenotypes = max(1, min_phenotypes)

        self._hpo_pattern = (
            self.HPO_PATTERN if strict_hpo_format else self.HPO_PATTERN_FLEXIBLE
        )

    def validate_query(self, query_terms: Sequence[PhenotypeTerm]) -> ValidationResult:
        """
        Validate query phenotype terms.

        Args:
            query_terms: Query phenotype terms, in clinician order

        Returns:
            ValidationResult with the distinct terms in supplied order
        """
        errors: List[str] = []
        warnings: List[str] = []
        validated: List[PhenotypeTerm] = []

        if not query_terms:
            errors.append("query phenotypes are required and cannot be empty")
            return ValidationResult(is_valid=False, warnings=warnings, errors=errors)

        seen: Set[str] = set()
        for term in query_terms:
            format_result = self.validate_phenotype_format(term.id)
            if format_result.errors:
                errors.extend(format_result.errors)
                continue
            warnings.extend(format_result.warnings)

            pheno_id = term.id.strip()
            if pheno_id in seen:
                warnings.append(f"Duplicate phenotype counted once: {pheno_id}")
                continue
            seen.add(pheno_id)
            validated.append(PhenotypeTerm(pheno_id, term.label))

        if not errors and len(validated) < self.min_phenotypes:
            errors.append(
                f"At least {self.min_phenotypes} phenotype(s) required, "
                f"got {len(validated)}"
            )

        for warning in warnings:
            logger.debug(warning)

        return ValidationResult(
            is_valid=len(errors) == 0,
            validated_terms=validated,
            warnings=warnings,
            errors=errors,
        )

    def validate_phenotype_format(self, pheno_id: str) -> ValidationResult:
        """
        Check a phenotype ID.

        A missing or blank ID is an error. An ID that does not look like an
        HPO ID is still valid, with a warning.

        Args:
            pheno_id: HPO phenotype ID

        Returns:
            ValidationResult
        """
        if not isinstance(pheno_id, str):
            return ValidationResult(
                is_valid=False,
                errors=[f"Phenotype ID must be string, got {type(pheno_id)}"],
            )

        pheno_id = pheno_id.strip()

        if not pheno_id:
            return ValidationResult(
                is_valid=False,
                errors=["Phenotype ID cannot be empty"],
            )

        warnings = []
        if not self._hpo_pattern.match(pheno_id):
            warnings.append(f"Non-standard HPO format: {pheno_id} (expected HP:XXXXXXX)")

        return ValidationResult(
            is_valid=True,
            validated_terms=[PhenotypeTerm(pheno_id)],
            warnings=warnings,
        )


# ==============================================================================
# Factory Function
# ==============================================================================
def create_input_validator(
    strict_hpo_format: bool = False,
    min_phenotypes: int = 1,
) -> InputValidator:
    """
    Factory function to create an InputValidator.

    Args:
        strict_hpo_format: Expect exactly 7 digits in HPO IDs
        min_phenotypes: Minimum required distinct phenotypes

    Returns:
        Configured InputValidator instance
    """
    return InputValidator(
        strict_hpo_format=strict_hpo_format,
        min_phenotypes=min_phenotypes,
    )
