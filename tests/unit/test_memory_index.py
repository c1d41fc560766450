"""
Unit tests for InMemoryIndex and text analysis.
"""

import pytest

from lucenesearch.core.exceptions import SearchIndexError
from lucenesearch.index import (
    Analyzer,
    Document,
    InMemoryIndex,
    find_similar_terms,
    levenshtein_distance,
    phrase_distance,
    similarity,
    wildcard_to_regex,
)
from lucenesearch.query import BooleanQuery, PhraseQuery, Sign, TermQuery


def ids(hits):
    return [hit.model_id for hit in hits]


class TestAnalyzer:
    """Tokenization."""
    
    def test_lowercase_words(self):
        assert Analyzer().tokenize("Red, ripe APPLE!") == ["red", "ripe", "apple"]
    
    def test_apostrophes_dropped(self):
        assert Analyzer()("Don't stop") == ["dont", "stop"]
    
    def test_stopwords(self):
        assert Analyzer(stopwords=["The"]).tokenize("the apple") == ["apple"]
    
    def test_empty(self):
        assert Analyzer().tokenize("") == []


class TestFuzzyHelpers:
    """Edit distance and similarity."""
    
    def test_levenshtein(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("apple", "apple") == 0
    
    def test_levenshtein_cap(self):
        assert levenshtein_distance("a", "abcdef", max_distance=2) == 3
    
    def test_similarity(self):
        assert similarity("apple", "apple") == 1.0
        assert similarity("aple", "apple") == pytest.approx(0.75)
        assert similarity("", "apple") == 0.0
    
    def test_find_similar_terms(self):
        matches = find_similar_terms("aple", ["apple", "ample", "pear"], 0.7)
        assert [term for term, _ in matches] == ["ample", "apple"]


class TestIndexWrites:
    """add / delete / update / clear."""
    
    @pytest.fixture
    def index(self):
        return InMemoryIndex()
    
    def test_add(self, index):
        doc_id = index.add(Document("Product", 1, {"name": "Red apple"}))
        
        assert doc_id == 0
        assert len(index) == 1
        assert index.fields == ["name"]
        assert index.get_document(0).model_id == 1
    
    def test_delete_by_key(self, index):
        index.add(Document("Product", 1, {"name": "Red apple"}))
        index.add(Document("Product", 2, {"name": "Green apple"}))
        
        assert index.delete_by_key("Product", 1) == 1
        assert len(index) == 1
        assert ids(index.find("apple")) == [2]
        assert index.find("red") == []
        assert index.get_document(0) is None
    
    def test_delete_missing(self, index):
        assert index.delete_by_key("Product", 99) == 0
    
    def test_update_replaces(self, index):
        index.add(Document("Product", 1, {"name": "Red apple"}))
        index.update(Document("Product", 1, {"name": "Yellow banana"}))
        
        assert len(index) == 1
        assert index.find("apple") == []
        assert ids(index.find("banana")) == [1]
    
    def test_clear(self, index):
        index.add(Document("Product", 1, {"name": "Red apple"}))
        index.clear()
        
        assert len(index) == 0
        assert index.find("apple") == []
        assert index.stats()["terms"] == 0
    
    def test_invalid_fuzzy_min_similarity(self):
        with pytest.raises(SearchIndexError):
            InMemoryIndex(fuzzy_min_similarity=1.5)


class TestIndexSearch:
    """Query execution."""
    
    @pytest.fixture
    def index(self):
        index = InMemoryIndex()
        index.add(Document("Product", 1, {"name": "Red apple", "color": "red"}))
        index.add(Document("Product", 2, {"name": "Red sweet apple", "color": "red"}))
        index.add(Document("Product", 3, {"name": "Green pear", "color": "green"}))
        index.add(Document("Product", 4, {"name": "Apple apple apple", "color": "yellow"}))
        return index
    
    def test_term_any_field(self, index):
        assert sorted(ids(index.find("red"))) == [1, 2]
    
    def test_term_field_scoped(self, index):
        assert ids(index.find("color:green")) == [3]
        assert index.find("color:apple") == []
        assert index.find("missing:apple") == []
    
    def test_case_insensitive(self, index):
        assert ids(index.find("PEAR")) == [3]
    
    def test_term_frequency_ranks_higher(self, index):
        assert ids(index.find("apple"))[0] == 4
    
    def test_hits_carry_scores(self, index):
        hits = index.find("apple")
        scores = [hit.score for hit in hits]
        
        assert scores == sorted(scores, reverse=True)
        assert all(score > 0 for score in scores)
    
    def test_phrase_exact(self, index):
        assert ids(index.find('name:"red apple"')) == [1]
    
    def test_phrase_slop(self, index):
        assert sorted(ids(index.find('name:"red apple"~1'))) == [1, 2]
    
    def test_exact_phrase_scores_higher(self, index):
        assert ids(index.find('name:"red apple"~1')) == [1, 2]
    
    def test_fuzzy(self, index):
        assert sorted(ids(index.find("name:aple~0.7"))) == [1, 2, 4]
        assert index.find("name:aple~0.8") == []
    
    def test_fuzzy_default_similarity(self, index):
        assert ids(index.find("name:pearr~")) == [3]
    
    def test_wildcard(self, index):
        assert sorted(ids(index.find("name:app*"))) == [1, 2, 4]
        assert ids(index.find("name:p?ar")) == [3]
    
    def test_range(self, index):
        assert sorted(ids(index.find("color:[green TO red]"))) == [1, 2, 3]
        assert ids(index.find("color:{green TO yellow}")) == [1, 2]
    
    def test_required_and_prohibited(self, index):
        assert ids(index.find("+apple -sweet -yellow")) == [1]
    
    def test_should_with_required(self, index):
        """Test optional clauses only add score once a required clause matches."""
        hits = index.find("+color:red sweet")
        
        assert ids(hits) == [2, 1]
    
    def test_only_prohibited_matches_nothing(self, index):
        assert index.find("-apple") == []
    
    def test_empty_boolean_matches_nothing(self, index):
        assert index.find(BooleanQuery()) == []
    
    def test_query_nodes(self, index):
        query = BooleanQuery()
        query.add_subquery(PhraseQuery("name", ("green", "pear")), Sign.MUST)
        query.add_subquery(TermQuery("color", "red"), None)
        
        assert ids(index.find(query)) == [3]
    
    def test_boost(self, index):
        plain = index.find("pear")[0].score
        boosted = index.find("pear^3")[0].score
        
        assert boosted == pytest.approx(plain * 3)
    
    def test_invalid_query_type(self, index):
        with pytest.raises(SearchIndexError):
            index.find(42)


class TestHelpers:
    """Phrase distance and wildcard patterns."""
    
    def test_phrase_distance_exact(self):
        assert phrase_distance([[0], [1]], 0) == 0
    
    def test_phrase_distance_gap(self):
        assert phrase_distance([[0], [2]], 0) is None
        assert phrase_distance([[0], [2]], 1) == 1
    
    def test_phrase_distance_reordered(self):
        assert phrase_distance([[1], [0]], 1) is None
        assert phrase_distance([[1], [0]], 2) == 2
    
    def test_phrase_distance_best_occurrence(self):
        assert phrase_distance([[0, 10], [5, 11]], 3) == 0
    
    def test_wildcard_to_regex(self):
        pattern = wildcard_to_regex("ap?le*")
        
        assert pattern.fullmatch("apple")
        assert pattern.fullmatch("apples")
        assert not pattern.fullmatch("aple")
        assert wildcard_to_regex("a.b").fullmatch("a.b")
        assert not wildcard_to_regex("a.b").fullmatch("axb")
