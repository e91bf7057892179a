"""Tests for category synonym expansion."""

import pytest

from centrematch.synonyms import expand_category_keyword, has_synonyms, synonym_table


def test_ugg_and_uggs_expand_to_each_other():
    ugg = expand_category_keyword("ugg")
    uggs = expand_category_keyword("uggs")
    assert "uggs" in ugg and "ugg" in ugg
    assert "ugg" in uggs and "uggs" in uggs


def test_charity_and_charities():
    assert "charities" in expand_category_keyword("charity")
    assert "charity" in expand_category_keyword("charities")


def test_keyword_is_normalised():
    expanded = expand_category_keyword("  Shoes ")
    assert "shoes" in expanded
    assert "footwear" in expanded


def test_unknown_keyword_is_singleton():
    assert expand_category_keyword("Widgets") == {"widgets"}


def test_expansion_does_not_mutate_table():
    before = dict(synonym_table())
    expanded = expand_category_keyword("pets")
    expanded.add("dragons")
    assert dict(synonym_table()) == before
    assert "dragons" not in expand_category_keyword("pets")


def test_table_is_read_only():
    with pytest.raises(TypeError):
        synonym_table()["dragons"] = ("wyverns",)


def test_has_synonyms():
    assert has_synonyms("Fashion")
    assert not has_synonyms("bondi")
