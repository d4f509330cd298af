"""
Unit tests for whole-string fuzzy matching. Run from repo root:
  python -m pytest backend/tests/test_fuzzy_matcher.py -v
"""


def test_diacritics_fold_to_match():
    from vegancheck.matching import fuzzy_match
    assert fuzzy_match("mjolk", "mjölk") is True
    assert fuzzy_match("karnmjolk", "kärnmjölk") is True
    assert fuzzy_match("creme fraiche", "crème fraiche") is True


def test_case_and_whitespace_ignored():
    from vegancheck.matching import fuzzy_match
    assert fuzzy_match("VASSLE", "vassle") is True
    assert fuzzy_match("  Mjölk  ", "mjölk") is True


def test_small_typo_matches():
    """One edit on a five or six letter word is within the 0.8 threshold."""
    from vegancheck.matching import fuzzy_match
    assert fuzzy_match("vasle", "vassle") is True
    assert fuzzy_match("gelatn", "gelatin") is True


def test_prefix_is_not_a_match():
    """A longer word that merely starts with a term is a different substance."""
    from vegancheck.matching import fuzzy_match
    assert fuzzy_match("mjölksyra", "mjölk") is False
    assert fuzzy_match("kokosmjölk", "mjölk") is False
    assert fuzzy_match("äggplanta", "ägg") is False


def test_empty_strings():
    from vegancheck.matching import fuzzy_match
    assert fuzzy_match("", "") is True
    assert fuzzy_match("x", "") is False
    assert fuzzy_match("", "mjölk") is False


def test_short_codes_need_exact_match():
    """E-numbers are too short to tolerate an edit."""
    from vegancheck.matching import fuzzy_match
    assert fuzzy_match("e471", "e472") is False
    assert fuzzy_match("E471", "e471") is True


def test_explicit_threshold():
    from vegancheck.matching import fuzzy_match
    assert fuzzy_match("vasle", "vassle", threshold=1.0) is False
    assert fuzzy_match("vasle", "vassle", threshold=0.5) is True


def test_similarity_bounds():
    from vegancheck.matching import similarity
    assert similarity("mjölk", "MJOLK") == 1.0
    assert similarity("", "") == 1.0
    assert 0.0 <= similarity("socker", "vassle") < 1.0


def test_best_match_exact_hit():
    from vegancheck.knowledge import KnowledgeBase
    from vegancheck.matching import best_match
    from vegancheck.models import MatchKind
    kb = KnowledgeBase.from_lists(non_vegan=["mjölk", "vassle"])
    evidence = best_match("Mjölk", kb.non_vegan)
    assert evidence is not None
    assert evidence.matched_term == "mjölk"
    assert evidence.match_kind == MatchKind.EXACT
    assert evidence.similarity == 1.0


def test_best_match_fuzzy_hit():
    from vegancheck.knowledge import KnowledgeBase
    from vegancheck.matching import best_match
    from vegancheck.models import MatchKind
    kb = KnowledgeBase.from_lists(non_vegan=["mjölk", "vassle"])
    evidence = best_match("vasle", kb.non_vegan)
    assert evidence is not None
    assert evidence.matched_term == "vassle"
    assert evidence.match_kind == MatchKind.FUZZY
    assert evidence.similarity == 0.8333


def test_best_match_none():
    from vegancheck.knowledge import KnowledgeBase
    from vegancheck.matching import best_match
    kb = KnowledgeBase.from_lists(non_vegan=["mjölk", "vassle"])
    assert best_match("socker", kb.non_vegan) is None
    assert best_match("", kb.non_vegan) is None


def test_swapped_compound_root_is_not_a_variant():
    """Long compounds allow at most two edits, so a different first root never matches."""
    from vegancheck.matching import fuzzy_match
    assert fuzzy_match("havremjölkspulver", "kärnmjölkspulver") is False
    assert fuzzy_match("sojamjölkspulver", "kärnmjölkspulver") is False
    assert fuzzy_match("karnmjolkspulvr", "kärnmjölkspulver") is True
