"""
Unit Tests for Phive Scoring
============================
Tests for TheoreticalModel, OrganismPhenotypeMatches and PhiveModelScorer
"""
import pytest

from phenosim.core.protocols import ModelScorerProtocol
from phenosim.core.types import (
    DiseaseModel,
    Organism,
    OrganismPhenotypeMatchScore,
    OrthologModel,
    PhenotypeMatch,
    PhenotypeTerm,
)
from phenosim.scoring import (
    OrganismPhenotypeMatches,
    PhiveModelScorer,
    TheoreticalModel,
    create_model_scorer,
)


# =============================================================================
# Helper Functions
# =============================================================================
def make_match(query_id: str, match_id: str, score: float) -> PhenotypeMatch:
    """Create a PhenotypeMatch"""
    return PhenotypeMatch(
        query_term_id=query_id,
        match_term_id=match_id,
        match_label=f"label of {match_id}",
        score=score,
    )


def make_disease(model_id: str, phenotype_ids) -> DiseaseModel:
    """Create a human DiseaseModel"""
    return DiseaseModel(
        model_id=model_id,
        organism=Organism.HUMAN,
        disease_id=f"OMIM:{model_id}",
        disease_term=f"Disease {model_id}",
        phenotype_ids=phenotype_ids,
    )


# =============================================================================
# Fixtures
# =============================================================================
@pytest.fixture
def query_terms():
    """Three query terms, the third has no match"""
    return [
        PhenotypeTerm("HP:0000001", "Q1"),
        PhenotypeTerm("HP:0000002", "Q2"),
        PhenotypeTerm("HP:0000003", "Q3"),
    ]


@pytest.fixture
def human_matches(query_terms):
    """
    Q1 -> A (0.9), Q1 -> C (0.5)
    Q2 -> B (0.7)
    Q3 -> (none)
    """
    q1, q2, q3 = query_terms
    return OrganismPhenotypeMatches(
        Organism.HUMAN,
        {
            q1: [make_match(q1.id, "HP:000000A", 0.9), make_match(q1.id, "HP:000000C", 0.5)],
            q2: [make_match(q2.id, "HP:000000B", 0.7)],
            q3: [],
        },
    )


@pytest.fixture
def example_scorer(human_matches):
    """Scorer normalised by {maxMatchScore=1.0, bestAvgScore=0.8}"""
    return PhiveModelScorer(
        human_matches,
        num_query_phenotypes=3,
        theoretical_model=TheoreticalModel(Organism.HUMAN, 1.0, 0.8),
    )


# =============================================================================
# Theoretical Model Tests
# =============================================================================
class TestTheoreticalModel:
    """Tests for TheoreticalModel"""

    def test_from_term_matches(self, human_matches):
        """Max is the best score anywhere, avg is the mean of per-term bests"""
        model = human_matches.best_theoretical_model
        assert model.organism == Organism.HUMAN
        assert model.max_match_score == pytest.approx(0.9)
        assert model.best_avg_score == pytest.approx(0.8)

    def test_unmatched_terms_excluded_from_average(self):
        """Query terms without matches do not dilute the average"""
        q1, q2 = PhenotypeTerm("HP:0000001"), PhenotypeTerm("HP:0000002")
        model = TheoreticalModel.from_term_matches(
            Organism.MOUSE,
            {q1: [make_match(q1.id, "MP:1", 2.0)], q2: []},
        )
        assert model.best_avg_score == pytest.approx(2.0)

    def test_no_matches_is_undefined(self):
        """An organism with no matches at all has no theoretical model"""
        q1 = PhenotypeTerm("HP:0000001")
        with pytest.raises(ValueError, match="undefined"):
            TheoreticalModel.from_term_matches(Organism.FISH, {q1: []})

    def test_non_positive_values_rejected(self):
        """Zero denominators are refused"""
        with pytest.raises(ValueError):
            TheoreticalModel(Organism.HUMAN, 0.0, 1.0)
        with pytest.raises(ValueError):
            TheoreticalModel(Organism.HUMAN, 1.0, 0.0)

    def test_all_zero_scores_rejected(self):
        """Matches that all score zero still leave the model undefined"""
        q1 = PhenotypeTerm("HP:0000001")
        with pytest.raises(ValueError):
            OrganismPhenotypeMatches(Organism.HUMAN, {q1: [make_match(q1.id, "HP:1", 0.0)]})


# =============================================================================
# Organism Phenotype Matches Tests
# =============================================================================
class TestOrganismPhenotypeMatches:
    """Tests for OrganismPhenotypeMatches"""

    def test_lookup_by_either_endpoint(self, human_matches):
        """Matches are reachable by query id and by match id"""
        by_query = human_matches.get_matches_for_term("HP:0000001")
        by_match = human_matches.get_matches_for_term("HP:000000A")

        assert len(by_query) == 2
        assert len(by_match) == 1
        assert by_match[0].query_term_id == "HP:0000001"

    def test_unknown_term_has_no_matches(self, human_matches):
        assert human_matches.get_matches_for_term("HP:9999999") == ()

    def test_duplicate_matches_collapsed(self):
        """Identical matches are stored once"""
        q1 = PhenotypeTerm("HP:0000001")
        match = make_match(q1.id, "HP:000000A", 0.9)
        matches = OrganismPhenotypeMatches(Organism.HUMAN, {q1: [match, match]})
        assert len(matches.term_phenotype_matches[q1]) == 1

    def test_table_is_read_only(self, human_matches, query_terms):
        """The stored table cannot be modified"""
        with pytest.raises(TypeError):
            human_matches.term_phenotype_matches[query_terms[0]] = ()

    def test_query_terms_in_order(self, human_matches, query_terms):
        assert human_matches.query_terms == query_terms

    def test_raw_scores(self, human_matches):
        """Max, sum and matched phenotypes for a model"""
        raw = human_matches.calculate_model_phenotype_scores(
            ["HP:000000A", "HP:000000B", "HP:UNMATCHED"]
        )
        assert raw.max_model_match_score == pytest.approx(0.9)
        assert raw.sum_model_best_match_scores == pytest.approx(1.6)
        assert raw.matching_phenotypes == frozenset({"HP:000000A", "HP:000000B"})
        assert [m.match_term_id for m in raw.best_phenotype_matches] == [
            "HP:000000A", "HP:000000B",
        ]

    def test_repeated_model_phenotype_counted_once(self, human_matches):
        """A phenotype id listed twice contributes once"""
        once = human_matches.calculate_model_phenotype_scores(["HP:000000A"])
        twice = human_matches.calculate_model_phenotype_scores(["HP:000000A", "HP:000000A"])
        assert twice == once

    def test_no_matching_phenotypes(self, human_matches):
        """A model with nothing matched gets the empty raw score"""
        raw = human_matches.calculate_model_phenotype_scores(["HP:UNMATCHED"])
        assert raw.max_model_match_score == 0.0
        assert raw.sum_model_best_match_scores == 0.0
        assert raw.matching_phenotypes == frozenset()

    def test_tie_keeps_first_match(self):
        """Equal best scores resolve to the first match"""
        q1, q2 = PhenotypeTerm("HP:0000001"), PhenotypeTerm("HP:0000002")
        first = make_match(q1.id, "HP:000000A", 0.8)
        second = make_match(q2.id, "HP:000000A", 0.8)
        matches = OrganismPhenotypeMatches(Organism.HUMAN, {q1: [first], q2: [second]})

        raw = matches.calculate_model_phenotype_scores(["HP:000000A"])
        assert raw.best_phenotype_matches == (first,)

    def test_best_match_trace(self, human_matches):
        """Trace lists the best match per query term, unmatched terms marked"""
        trace = human_matches.best_match_trace()

        assert [str(e) for e in trace.entries] == [
            "HP:0000001-HP:000000A=0.9",
            "HP:0000002-HP:000000B=0.7",
            "HP:0000003-NOT MATCHED",
        ]
        payload = trace.to_dict()
        assert payload["organism"] == "human"
        assert payload["bestMaxScore"] == pytest.approx(0.9)
        assert payload["bestMatches"][2]["matchTermId"] is None


# =============================================================================
# Phive Model Scorer Tests
# =============================================================================
class TestPhiveModelScorer:
    """Tests for PhiveModelScorer"""

    def test_worked_example(self, example_scorer):
        """max=0.9, avg=1.6/5=0.32, combined=50*(0.9/1.0+0.32/0.8)=65"""
        result = example_scorer.score_model(make_disease("1", ["HP:000000A", "HP:000000B"]))
        assert result.score == pytest.approx(0.65)
        assert len(result.best_matches) == 2

    def test_empty_phenotypes_score_zero(self, example_scorer):
        """No phenotypes means a score of exactly 0"""
        result = example_scorer.score_model(make_disease("2", []))
        assert result.score == 0.0
        assert result.best_matches == ()

    def test_unmatched_phenotypes_score_zero(self, example_scorer):
        result = example_scorer.score_model(make_disease("3", ["HP:UNMATCHED"]))
        assert result.score == 0.0

    def test_score_capped_at_one(self, human_matches):
        """Scores above the theoretical best are capped"""
        scorer = PhiveModelScorer(
            human_matches,
            num_query_phenotypes=1,
            theoretical_model=TheoreticalModel(Organism.HUMAN, 0.1, 0.1),
        )
        result = scorer.score_model(make_disease("4", ["HP:000000A", "HP:000000B"]))
        assert result.score == 1.0

    def test_scores_within_bounds(self, human_matches):
        """Every score lies in [0, 1]"""
        scorer = PhiveModelScorer(human_matches, num_query_phenotypes=3)
        for ids in ([], ["HP:000000A"], ["HP:000000C"], ["HP:000000A", "HP:000000B", "HP:000000C"]):
            score = scorer.score_model(make_disease("x", ids)).score
            assert 0.0 <= score <= 1.0

    def test_order_invariance(self, example_scorer):
        """Reordering model phenotypes does not change the score"""
        ids = ["HP:000000A", "HP:000000B", "HP:000000C"]
        forward = example_scorer.score_model(make_disease("5", ids)).score
        backward = example_scorer.score_model(make_disease("5", list(reversed(ids)))).score
        assert forward == backward

    def test_deterministic(self, example_scorer):
        """Scoring twice yields identical results"""
        model = make_disease("6", ["HP:000000A", "HP:000000C"])
        assert example_scorer.score_model(model) == example_scorer.score_model(model)

    def test_higher_max_scores_higher(self, example_scorer):
        """Raising the best match raises the score"""
        low = example_scorer.score_model(make_disease("7", ["HP:000000B"])).score
        high = example_scorer.score_model(make_disease("8", ["HP:000000A"])).score
        assert high > low

    def test_higher_sum_scores_higher(self, example_scorer):
        """Same best match, an extra matched phenotype raises the score"""
        single = example_scorer.score_model(make_disease("10", ["HP:000000A"])).score
        double = example_scorer.score_model(make_disease("11", ["HP:000000A", "HP:000000C"])).score
        # 50 * (0.9 + (0.9 / 4) / 0.8) vs 50 * (0.9 + (1.4 / 5) / 0.8)
        assert single == pytest.approx(0.5 * (0.9 + 0.225 / 0.8))
        assert double == pytest.approx(0.5 * (0.9 + 0.28 / 0.8))
        assert double > single

    def test_combined_score_grows_with_sum(self, example_scorer):
        low = OrganismPhenotypeMatchScore(0.9, 0.9, frozenset({"HP:000000A"}))
        high = OrganismPhenotypeMatchScore(0.9, 1.6, frozenset({"HP:000000A"}))
        assert example_scorer.calculate_combined_score(high) > example_scorer.calculate_combined_score(low)

    def test_more_query_phenotypes_lowers_average(self, human_matches):
        """The average is diluted by unmatched query phenotypes"""
        model = make_disease("9", ["HP:000000A"])
        few = PhiveModelScorer(human_matches, num_query_phenotypes=1).score_model(model).score
        many = PhiveModelScorer(human_matches, num_query_phenotypes=10).score_model(model).score
        assert many < few

    def test_defaults_to_own_theoretical_model(self, human_matches):
        scorer = PhiveModelScorer(human_matches, num_query_phenotypes=3)
        assert scorer.theoretical_max_match_score == pytest.approx(0.9)
        assert scorer.theoretical_best_avg_score == pytest.approx(0.8)
        assert scorer.organism == Organism.HUMAN

    def test_benchmark_theoretical_model(self, query_terms):
        """A benchmark organism's theoretical model normalises another organism"""
        q1 = query_terms[0]
        mouse = OrganismPhenotypeMatches(Organism.MOUSE, {q1: [make_match(q1.id, "MP:1", 2.0)]})
        human = OrganismPhenotypeMatches(Organism.HUMAN, {q1: [make_match(q1.id, "HP:1", 4.0)]})
        model = OrthologModel("m1", Organism.MOUSE, "MGI:1", "Gene1", ("MP:1",))

        own = PhiveModelScorer(mouse, 1).score_model(model).score
        benchmarked = PhiveModelScorer(
            mouse, 1, theoretical_model=human.best_theoretical_model
        ).score_model(model).score

        assert own == pytest.approx(0.75)
        assert benchmarked == pytest.approx(0.375)

    @pytest.mark.parametrize("num_query", [0, -1])
    def test_invalid_query_count(self, human_matches, num_query):
        with pytest.raises(ValueError):
            PhiveModelScorer(human_matches, num_query_phenotypes=num_query)

    def test_factory(self, human_matches):
        scorer = create_model_scorer(human_matches, 3)
        assert isinstance(scorer, PhiveModelScorer)
        assert isinstance(scorer, ModelScorerProtocol)
        assert scorer.num_query_phenotypes == 3
