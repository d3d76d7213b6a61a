"""
Unit Tests for PhenoGrid Ranking
================================
Tests for PhenoGridBuilder grouping, ranking and serialization
"""
import pytest

from phenosim.core.types import (
    DiseaseModel,
    ModelPhenotypeMatchScore,
    Organism,
    OrthologModel,
    PhenotypeMatch,
)
from phenosim.ranking import (
    DEFAULT_GRID_ID,
    PhenoGridBuilder,
    create_phenogrid_builder,
    to_integer_score,
)


# =============================================================================
# Helper Functions
# =============================================================================
def disease_score(model_id: str, score: float) -> ModelPhenotypeMatchScore:
    """Create a scored human disease model"""
    model = DiseaseModel(model_id, Organism.HUMAN, f"OMIM:{model_id}", f"Disease {model_id}")
    return ModelPhenotypeMatchScore(score, model)


def gene_score(model_id: str, organism: Organism, score: float) -> ModelPhenotypeMatchScore:
    """Create a scored ortholog model"""
    model = OrthologModel(model_id, organism, f"GENE:{model_id}", f"gene{model_id}")
    return ModelPhenotypeMatchScore(score, model)


@pytest.fixture
def builder():
    return PhenoGridBuilder()


# =============================================================================
# Ranking Tests
# =============================================================================
class TestRanking:
    """Tests for ranking within a group"""

    def test_ties_keep_input_order(self, builder):
        """[0.9, 0.9, 0.3] ranks 0, 1, 2 with the first tied model first"""
        scores = [disease_score("a", 0.9), disease_score("b", 0.9), disease_score("c", 0.3)]
        grid = builder.build(["HP:0000001"], scores)

        matches = grid.groups[0].matches
        assert [m.entity_id for m in matches] == ["OMIM:a", "OMIM:b", "OMIM:c"]
        assert [m.rank for m in matches] == [0, 1, 2]

    def test_descending_order(self, builder):
        scores = [disease_score("low", 0.1), disease_score("high", 0.8), disease_score("mid", 0.5)]
        grid = builder.build(["HP:0000001"], scores)

        matches = grid.groups[0].matches
        assert [m.entity_id for m in matches] == ["OMIM:high", "OMIM:mid", "OMIM:low"]

    def test_ranks_restart_per_group(self, builder):
        scores = [
            disease_score("d", 0.4),
            gene_score("m", Organism.MOUSE, 0.9),
            gene_score("z", Organism.FISH, 0.2),
        ]
        grid = builder.build(["HP:0000001"], scores)
        assert [g.matches[0].rank for g in grid.groups] == [0, 0, 0]


# =============================================================================
# Grouping Tests
# =============================================================================
class TestGrouping:
    """Tests for grouping by organism"""

    def test_group_order_follows_organism(self, builder):
        """Groups appear human, mouse, fish regardless of input order"""
        scores = [
            gene_score("z", Organism.FISH, 0.2),
            gene_score("m", Organism.MOUSE, 0.9),
            disease_score("d", 0.4),
        ]
        grid = builder.build(["HP:0000001"], scores)
        assert [g.organism_taxon.label for g in grid.groups] == [
            "Homo sapiens", "Mus musculus", "Danio rerio",
        ]

    def test_empty_groups_omitted(self, builder):
        grid = builder.build(["HP:0000001"], [gene_score("m", Organism.MOUSE, 0.9)])
        assert len(grid.groups) == 1
        assert grid.groups[0].organism_taxon.id == "NCBITaxon:10090"

    def test_no_scores(self, builder):
        grid = builder.build(["HP:0000001"], [])
        assert grid.groups == ()

    def test_entity_by_model_type(self, builder):
        """Diseases show disease id/term, genes show gene id/symbol"""
        grid = builder.build(
            ["HP:0000001"],
            [disease_score("d", 0.4), gene_score("m", Organism.MOUSE, 0.9)],
        )
        disease, gene = grid.groups[0].matches[0], grid.groups[1].matches[0]

        assert (disease.entity_id, disease.entity_label, disease.entity_type) == (
            "OMIM:d", "Disease d", "disease",
        )
        assert (gene.entity_id, gene.entity_label, gene.entity_type) == (
            "GENE:m", "genem", "gene",
        )

    def test_query_ids_deduplicated(self, builder):
        grid = builder.build(["HP:0000002", "HP:0000001", "HP:0000002"], [])
        assert grid.query_term_ids == ("HP:0000002", "HP:0000001")


# =============================================================================
# Serialization Tests
# =============================================================================
class TestSerialization:
    """Tests for PhenoGrid.to_dict"""

    @pytest.mark.parametrize("score,expected", [
        (0.0, 0),
        (0.65, 65),
        (0.655, 66),
        (0.994, 99),
        (1.0, 100),
    ])
    def test_integer_score(self, score, expected):
        assert to_integer_score(score) == expected

    def test_to_dict(self):
        match = PhenotypeMatch("HP:0000001", "MP:0000001", "seizures", 2.0)
        model = OrthologModel("m", Organism.MOUSE, "MGI:1", "Scn1a", ("MP:0000001",))
        grid = create_phenogrid_builder("test-grid").build(
            ["HP:0000001"], [ModelPhenotypeMatchScore(0.65, model, (match,))]
        )

        assert grid.to_dict() == {
            "id": "test-grid",
            "queryTermIds": ["HP:0000001"],
            "groups": [{
                "organismTaxon": {"id": "NCBITaxon:10090", "label": "Mus musculus"},
                "scoreMethod": "test-grid",
                "matches": [{
                    "entityId": "MGI:1",
                    "entityLabel": "Scn1a",
                    "entityType": "gene",
                    "phenotypeMatches": [match.to_dict()],
                    "integerScore": 65,
                    "rank": 0,
                }],
            }],
        }

    def test_default_grid_id(self, builder):
        assert builder.build([], []).id == DEFAULT_GRID_ID
