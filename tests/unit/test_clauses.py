"""
Unit tests for clause compilation.
"""

import pytest

from lucenesearch.query import (
    ClauseOptions,
    CompiledClause,
    Sign,
    compile_clause,
    normalize_fields,
)


def where(field, value, **options) -> CompiledClause:
    return compile_clause(ClauseOptions.for_where(field, value, **options))


def find(value, field="*", **options) -> CompiledClause:
    return compile_clause(ClauseOptions.for_find(value, field, **options))


class TestWhereClauses:
    """Phrase clauses (``where`` defaults)."""
    
    def test_default_options(self):
        compiled = where("test", "test value")
        
        assert compiled.fragment == 'test:("test value")'
        assert compiled.sign is Sign.MUST
    
    def test_fuzzy_coefficient(self):
        assert where("test", "test value", fuzzy=0.1).fragment == 'test:("test~0.1 value~0.1")'
    
    def test_fuzzy_true(self):
        assert where("test", "test value", fuzzy=True).fragment == 'test:("test~ value~")'
    
    def test_fuzzy_false(self):
        assert where("test", "test value", fuzzy=False).fragment == 'test:("test value")'
    
    @pytest.mark.parametrize("fuzzy", [2, -0.5, "abc", "1.5", [0.1]])
    def test_invalid_fuzzy_ignored(self, fuzzy):
        """Test out-of-range or non-numeric fuzziness leaves tokens unchanged."""
        assert where("test", "test value", fuzzy=fuzzy).fragment == 'test:("test value")'
    
    def test_fuzzy_numeric_string(self):
        assert where("test", "test", fuzzy="0.5").fragment == 'test:("test~0.5")'
    
    @pytest.mark.parametrize("fuzzy", [0.00001, 1e-05, "1e-05"])
    def test_small_fuzzy_written_fixed_point(self, fuzzy):
        assert find("apple", "name", fuzzy=fuzzy).fragment == "name:(apple~0.00001)"
    
    @pytest.mark.parametrize("fuzzy,suffix", [(0, "~0"), (1, "~1"), (0.25, "~0.25")])
    def test_fuzzy_bounds(self, fuzzy, suffix):
        assert find("apple", fuzzy=fuzzy).fragment == "apple" + suffix
    
    def test_no_phrase(self):
        compiled = where("test", "test value", fuzzy=0.1, phrase=False)
        assert compiled.fragment == "test:(test~0.1 value~0.1)"
    
    def test_proximity(self):
        assert where("test", "test value", proximity=10).fragment == 'test:("test value"~10)'
    
    def test_proximity_forces_quotes(self):
        compiled = where("test", "test value", phrase=False, proximity=3)
        assert compiled.fragment == 'test:("test value"~3)'
    
    @pytest.mark.parametrize("proximity", [-1, "abc", 2.5, True])
    def test_invalid_proximity_not_appended(self, proximity):
        """Test a truthy but invalid proximity quotes without a suffix."""
        compiled = where("test", "test value", phrase=False, proximity=proximity)
        assert compiled.fragment == 'test:("test value")'
    
    def test_zero_proximity_ignored(self):
        assert where("test", "test value", phrase=False, proximity=0).fragment == "test:(test value)"
    
    def test_multiple_fields(self):
        compiled = where(["field1", "field2"], "value", proximity=10)
        assert compiled.fragment == 'field1:("value"~10) OR field2:("value"~10)'
    
    def test_multiple_fields_with_fuzzy(self):
        compiled = where(["field1", "field2"], "value", fuzzy=0.1, proximity=10)
        assert compiled.fragment == 'field1:("value~0.1"~10) OR field2:("value~0.1"~10)'
    
    def test_value_trimmed(self):
        assert where("name", "  apple  ").fragment == 'name:("apple")'
    
    def test_quoted_value_keeps_operator_words(self):
        assert where("name", "salt and pepper").fragment == 'name:("salt and pepper")'


class TestFindClauses:
    """Term clauses (``find`` defaults)."""
    
    def test_default_field(self):
        compiled = find("test value")
        
        assert compiled.fragment == "test value"
        assert compiled.sign is Sign.MUST
    
    def test_field_list(self):
        assert find("test value", ["test"]).fragment == "test:(test value)"
    
    def test_special_chars_and_operators(self):
        assert find("C++ and more", "name").fragment == "name:(C\\+\\+ more)"
    
    def test_phrase_option(self):
        assert find("test value", "test", phrase=True).fragment == 'test:("test value")'
    
    @pytest.mark.parametrize("value", ["", "   ", "and", "NOT", "or and"])
    def test_nothing_to_search_is_empty_fragment(self, value):
        """Test a value with no searchable words drops the field scope."""
        compiled = find(value, ["title", "body"])
        
        assert compiled.fragment == ""
        assert compiled.sign is Sign.MUST
    
    def test_edge_keywords_removed(self):
        assert find("and apple", "title").fragment == "title:(apple)"
        assert find("rock or", "title").fragment == "title:(rock)"
    
    def test_empty_phrase_kept(self):
        assert where("title", "").fragment == 'title:("")'


class TestSigns:
    """Clause occurrence."""
    
    def test_required_only(self):
        compiled = where("test", "test value", required=False)
        assert compiled.sign is Sign.SHOULD
        assert compiled.sign.to_bool() is None
    
    def test_prohibited(self):
        compiled = where("test", "test value", prohibited=True)
        assert compiled.sign is Sign.MUST_NOT
        assert compiled.sign.to_bool() is False
    
    def test_not_required_not_prohibited(self):
        compiled = where("test", "test value", required=False, prohibited=False)
        assert compiled.sign.to_bool() is None
    
    def test_prohibited_wins(self):
        assert where("test", "value", required=True, prohibited=True).sign is Sign.MUST_NOT
    
    def test_coerce(self):
        assert Sign.coerce(True) is Sign.MUST
        assert Sign.coerce(False) is Sign.MUST_NOT
        assert Sign.coerce(None) is Sign.SHOULD
        assert Sign.coerce("must_not") is Sign.MUST_NOT
        assert Sign.coerce(Sign.SHOULD) is Sign.SHOULD


class TestNormalizeFields:
    """Field argument normalization."""
    
    def test_any_field(self):
        assert normalize_fields(None) == ()
        assert normalize_fields("*") == ()
    
    def test_single(self):
        assert normalize_fields(" name ") == ("name",)
    
    def test_list_drops_empty_and_any(self):
        assert normalize_fields(["a", "*", "", " b "]) == ("a", "b")
    
    def test_set_sorted(self):
        assert normalize_fields({"title", "body"}) == ("body", "title")
