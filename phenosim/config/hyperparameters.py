"""
phenosim Hyperparameter Configuration
=====================================
Centralized scoring and validation parameters with frontend API support.

Module: phenosim/config/hyperparameters.py

Purpose:
    Provide a unified parameter management system that:
    - Defines all tunable parameters for scoring and query validation
    - Exports JSON Schema for frontend validation
    - Supports runtime parameter updates via API
    - Persists configurations to YAML/JSON files
    - Validates parameter ranges and types

Components:
    - HyperparameterSpec: Single parameter specification with metadata
    - ScoringHyperparameters: Scoring / ranking parameters
    - ValidationHyperparameters: Query validation parameters
    - HyperparameterManager: Central manager for all parameters

Dependencies:
    - yaml: Configuration file I/O
    - json: JSON export

Called by:
    - phenosim/api/ (parameter query endpoint)
    - phenosim/inference/pipeline.py (pipeline configuration)

Version: 1.0.0
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from phenosim.core.types import Organism

logger = logging.getLogger(__name__)


ORGANISM_OPTIONS: List[str] = [o.value for o in Organism]
NO_BENCHMARK = "none"


# =============================================================================
# Parameter Specification
# =============================================================================
class ParameterType(str, Enum):
    """Parameter types for frontend rendering"""
    FLOAT = "float"
    INT = "int"
    BOOL = "bool"
    STRING = "string"
    SELECT = "select"            # Dropdown with options
    MULTISELECT = "multiselect"  # Subset of options


@dataclass
class HyperparameterSpec:
    """
    Single hyperparameter specification

    Provides metadata for frontend rendering and validation.
    """
    name: str
    value: Any
    param_type: ParameterType
    description: str
    category: str  # "scoring", "validation"

    # Constraints
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    options: Optional[List[Any]] = None  # For SELECT / MULTISELECT

    # UI hints
    display_name: Optional[str] = None
    advanced: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        result = {
            "name": self.name,
            "value": self.value,
            "type": self.param_type.value,
            "description": self.description,
            "category": self.category,
            "display_name": self.display_name or self.name.replace("_", " ").title(),
            "advanced": self.advanced,
        }

        if self.min_value is not None:
            result["min"] = self.min_value
        if self.max_value is not None:
            result["max"] = self.max_value
        if self.options is not None:
            result["options"] = self.options

        return result

    def validate(self, value: Any) -> bool:
        """Validate a value against constraints"""
        if self.param_type == ParameterType.SELECT:
            return value in (self.options or [])

        if self.param_type == ParameterType.MULTISELECT:
            return isinstance(value, list) and all(v in (self.options or []) for v in value)

        if self.param_type == ParameterType.BOOL:
            return isinstance(value, bool)

        if self.param_type in (ParameterType.FLOAT, ParameterType.INT):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return False
            if self.param_type == ParameterType.INT and not isinstance(value, int):
                return False
            if self.min_value is not None and value < self.min_value:
                return False
            if self.max_value is not None and value > self.max_value:
                return False

        if self.param_type == ParameterType.STRING:
            return isinstance(value, str) and bool(value.strip())

        return True


# =============================================================================
# Scoring Hyperparameters
# =============================================================================
@dataclass
class ScoringHyperparameters:
    """
    Scoring-phase hyperparameters

    Parameters that affect how models are scored and ranked.
    """
    # Concurrency
    max_workers: int = 4

    # Organisms
    enabled_organisms: List[str] = field(default_factory=lambda: list(ORGANISM_OPTIONS))
    benchmark_organism: str = NO_BENCHMARK

    # Output
    include_trace: bool = True
    grid_id: str = "hiPhive"

    @classmethod
    def get_specs(cls) -> List[HyperparameterSpec]:
        """Get parameter specifications for frontend"""
        return [
            HyperparameterSpec(
                name="max_workers",
                value=4,
                param_type=ParameterType.INT,
                description="Worker threads used to score candidate models (1 = sequential)",
                category="scoring",
                min_value=1,
                max_value=64,
                advanced=True,
            ),
            HyperparameterSpec(
                name="enabled_organisms",
                value=list(ORGANISM_OPTIONS),
                param_type=ParameterType.MULTISELECT,
                description="Organisms whose models are scored",
                category="scoring",
                options=list(ORGANISM_OPTIONS),
            ),
            HyperparameterSpec(
                name="benchmark_organism",
                value=NO_BENCHMARK,
                param_type=ParameterType.SELECT,
                description=(
                    "Organism whose theoretical model normalises every organism's "
                    "scores ('none' = each organism uses its own)"
                ),
                category="scoring",
                options=[NO_BENCHMARK] + list(ORGANISM_OPTIONS),
            ),
            HyperparameterSpec(
                name="include_trace",
                value=True,
                param_type=ParameterType.BOOL,
                description="Include per-organism best-match traces in results",
                category="scoring",
            ),
            HyperparameterSpec(
                name="grid_id",
                value="hiPhive",
                param_type=ParameterType.STRING,
                description="Identifier of the produced PhenoGrid",
                category="scoring",
                advanced=True,
            ),
        ]


# =============================================================================
# Validation Hyperparameters
# =============================================================================
@dataclass
class ValidationHyperparameters:
    """Query phenotype validation parameters"""
    strict_hpo_format: bool = False
    min_phenotypes: int = 1

    @classmethod
    def get_specs(cls) -> List[HyperparameterSpec]:
        """Get parameter specifications for frontend"""
        return [
            HyperparameterSpec(
                name="strict_hpo_format",
                value=False,
                param_type=ParameterType.BOOL,
                description="Require exactly 7 digits in HPO ids",
                category="validation",
            ),
            HyperparameterSpec(
                name="min_phenotypes",
                value=1,
                param_type=ParameterType.INT,
                description="Minimum number of query phenotypes",
                category="validation",
                min_value=1,
                max_value=100,
            ),
        ]


# =============================================================================
# Hyperparameter Manager
# =============================================================================
class HyperparameterManager:
    """
    Central manager for all hyperparameters

    Provides:
    - Unified access to all parameters
    - JSON Schema export for frontend
    - Parameter update with validation
    - Configuration persistence
    """

    def __init__(
        self,
        scoring: Optional[ScoringHyperparameters] = None,
        validation: Optional[ValidationHyperparameters] = None,
    ):
        self.scoring = scoring or ScoringHyperparameters()
        self.validation = validation or ValidationHyperparameters()

        self._specs_cache: Optional[Dict[str, HyperparameterSpec]] = None

    # =========================================================================
    # Frontend API Methods
    # =========================================================================
    def get_all_specs(self) -> List[Dict[str, Any]]:
        """
        Get all parameter specifications for frontend

        Returns:
            List of parameter specs as dicts, suitable for JSON response
        """
        specs = []
        specs.extend([s.to_dict() for s in ScoringHyperparameters.get_specs()])
        specs.extend([s.to_dict() for s in ValidationHyperparameters.get_specs()])
        return specs

    def get_specs_by_category(self, category: str) -> List[Dict[str, Any]]:
        """Get parameter specs for a specific category"""
        if category == "scoring":
            return [s.to_dict() for s in ScoringHyperparameters.get_specs()]
        elif category == "validation":
            return [s.to_dict() for s in ValidationHyperparameters.get_specs()]
        else:
            return []

    def get_current_values(self) -> Dict[str, Any]:
        """
        Get current values of all parameters

        Returns:
            Dict with category -> parameter -> value structure
        """
        return {
            "scoring": asdict(self.scoring),
            "validation": asdict(self.validation),
        }

    def get_json_schema(self) -> Dict[str, Any]:
        """
        Export JSON Schema for frontend form generation

        Returns:
            JSON Schema compatible dict
        """
        properties = {}
        for spec in self.get_all_specs():
            prop = {
                "title": spec["display_name"],
                "description": spec["description"],
            }

            if spec["type"] in ("float", "int"):
                prop["type"] = "number" if spec["type"] == "float" else "integer"
                if "min" in spec:
                    prop["minimum"] = spec["min"]
                if "max" in spec:
                    prop["maximum"] = spec["max"]
            elif spec["type"] == "bool":
                prop["type"] = "boolean"
            elif spec["type"] == "select":
                prop["type"] = "string"
                prop["enum"] = spec.get("options", [])
            elif spec["type"] == "multiselect":
                prop["type"] = "array"
                prop["items"] = {"type": "string", "enum": spec.get("options", [])}
            else:
                prop["type"] = "string"

            prop["default"] = spec["value"]
            properties[spec["name"]] = prop

        return {
            "$schema": "http://json-schema.org/draft-07/schema#",
            "type": "object",
            "properties": properties,
        }

    def update_parameter(self, name: str, value: Any) -> Dict[str, Any]:
        """
        Update a single parameter

        Args:
            name: Parameter name
            value: New value

        Returns:
            Dict with success status and any error
        """
        result = {"success": False, "warnings": []}

        spec = self._find_spec(name)
        if spec is None:
            result["error"] = f"Unknown parameter: {name}"
            return result

        if not spec.validate(value):
            result["error"] = f"Invalid value for {name}: {value}"
            return result

        if spec.category == "scoring" and hasattr(self.scoring, name):
            setattr(self.scoring, name, value)
        elif spec.category == "validation" and hasattr(self.validation, name):
            setattr(self.validation, name, value)
        else:
            result["error"] = f"Parameter {name} not found in {spec.category}"
            return result

        result["success"] = True
        logger.info(f"Updated parameter {name} = {value}")
        return result

    def update_parameters(self, updates: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update multiple parameters at once

        Args:
            updates: Dict of name -> value pairs

        Returns:
            Dict with results for each parameter
        """
        results = {
            "success": True,
            "updated": [],
            "failed": [],
        }

        for name, value in updates.items():
            result = self.update_parameter(name, value)
            if result["success"]:
                results["updated"].append(name)
            else:
                results["failed"].append({"name": name, "error": result.get("error")})
                results["success"] = False

        return results

    def _find_spec(self, name: str) -> Optional[HyperparameterSpec]:
        """Find parameter spec by name"""
        if self._specs_cache is None:
            self._specs_cache = {}
            for spec in ScoringHyperparameters.get_specs():
                self._specs_cache[spec.name] = spec
            for spec in ValidationHyperparameters.get_specs():
                self._specs_cache[spec.name] = spec

        return self._specs_cache.get(name)

    # =========================================================================
    # Persistence
    # =========================================================================
    def _to_config(self) -> Dict[str, Any]:
        return {
            "version": "1.0",
            "updated_at": datetime.now().isoformat(),
            **self.get_current_values(),
        }

    def save_to_yaml(self, path: Union[str, Path]) -> None:
        """Save current configuration to YAML file"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.dump(self._to_config(), f, default_flow_style=False, sort_keys=False)

        logger.info(f"Configuration saved to {path}")

    def load_from_yaml(self, path: Union[str, Path]) -> None:
        """
        Load configuration from YAML file

        Unknown keys are ignored. Invalid values raise ValueError.
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            config = yaml.safe_load(f) or {}

        for category in ("scoring", "validation"):
            for key, value in (config.get(category) or {}).items():
                spec = self._find_spec(key)
                if spec is None or spec.category != category:
                    logger.warning(f"Ignoring unknown {category} parameter: {key}")
                    continue
                result = self.update_parameter(key, value)
                if not result["success"]:
                    raise ValueError(f"{path}: {result['error']}")

        logger.info(f"Configuration loaded from {path}")

    def save_to_json(self, path: Union[str, Path]) -> None:
        """Save current configuration to JSON file"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self._to_config(), f, indent=2)

        logger.info(f"Configuration saved to {path}")

    # =========================================================================
    # Conversion to component configs
    # =========================================================================
    def to_pipeline_config(self) -> Dict[str, Any]:
        """Convert to PipelineConfig compatible dict"""
        return {
            "max_workers": self.scoring.max_workers,
            "enabled_organisms": list(self.scoring.enabled_organisms),
            "benchmark_organism": (
                None if self.scoring.benchmark_organism == NO_BENCHMARK
                else self.scoring.benchmark_organism
            ),
            "include_trace": self.scoring.include_trace,
            "grid_id": self.scoring.grid_id,
            "strict_hpo_format": self.validation.strict_hpo_format,
            "min_phenotypes": self.validation.min_phenotypes,
        }


# =============================================================================
# Singleton instance for global access
# =============================================================================
_default_manager: Optional[HyperparameterManager] = None


def get_hyperparameter_manager() -> HyperparameterManager:
    """Get the global hyperparameter manager instance"""
    global _default_manager
    if _default_manager is None:
        _default_manager = HyperparameterManager()
    return _default_manager


def reset_hyperparameter_manager() -> None:
    """Reset the global manager (for testing)"""
    global _default_manager
    _default_manager = None


# =============================================================================
# Module Exports
# =============================================================================
__all__ = [
    "ParameterType",
    "HyperparameterSpec",
    "ScoringHyperparameters",
    "ValidationHyperparameters",
    "HyperparameterManager",
    "get_hyperparameter_manager",
    "reset_hyperparameter_manager",
]
