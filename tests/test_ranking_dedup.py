"""Ranked index ordering and adjacent-duplicate removal."""
from aidmatch.match.dedup import deduplicate, is_duplicate
from aidmatch.match.pool import CandidateRecord, ResponsePool
from aidmatch.match.ranking import RankedIndex, rank_key
from aidmatch.tags import AttributeKey as K


def test_rank_key_descending_score():
    assert rank_key(92.0) < rank_key(89.0)
    assert rank_key(100.0) == 0
    assert rank_key(85.0) == 150


def test_ties_keep_insertion_order():
    ranked = RankedIndex()
    ranked.add_score(90.0, 4)
    ranked.add_score(95.0, 7)
    ranked.add_score(90.0, 2)
    assert list(ranked) == [7, 4, 2]


def test_explicit_iteration():
    ranked = RankedIndex()
    ranked.add_score(90.0, 1)
    ranked.add_score(91.0, 0)
    ranked.start_iteration()
    assert ranked.next() == 0
    assert ranked.next() == 1
    assert ranked.next() is None
    ranked.start_iteration()
    assert ranked.next() == 0


def _pool(*rows):
    pool = ResponsePool()
    for row in rows:
        for key, value in row.items():
            pool.set_value(pool.current_index, key, value)
        pool.close_record(0, first_index=pool.current_index)
    return pool


A = {K.TITLE: "Blue in Green", K.ARTIST: "Miles Davis", K.ALBUM: "Kind of Blue"}
B = {K.TITLE: "Blue in Green", K.ARTIST: "Miles Davis", K.ALBUM: "Jazz Classics"}


def test_adjacent_duplicates_collapse():
    pool = _pool({**A, K.AUDIOID_SCORE: 95.0}, {**A, K.AUDIOID_SCORE: 90.0}, B)
    ranked = RankedIndex()
    for idx, score in ((0, 95.0), (1, 90.0), (2, 88.0)):
        ranked.add_score(score, idx)
    assert list(deduplicate(pool, ranked)) == [0, 2]


def test_non_adjacent_duplicates_are_kept():
    pool = _pool(A, B, A)
    ranked = RankedIndex()
    for idx, score in ((0, 95.0), (1, 90.0), (2, 88.0)):
        ranked.add_score(score, idx)
    assert list(deduplicate(pool, ranked)) == [0, 1, 2]


def test_comparison_uses_fields_present_on_both_sides():
    left = CandidateRecord({K.TITLE: "x", K.ALBUM: "y"})
    right = CandidateRecord({K.TITLE: "x", K.DATE: "1959"})
    assert is_duplicate(left, right)
    assert not is_duplicate(left, CandidateRecord({K.TITLE: "z"}))


def test_dropped_candidate_is_not_the_comparison_base():
    # 1 duplicates 0 and is dropped; 2 is compared against 0, not 1
    pool = _pool(
        {K.TITLE: "t", K.ALBUM: "a"},
        {K.TITLE: "t"},
        {K.TITLE: "t", K.ALBUM: "b"},
    )
    ranked = RankedIndex()
    for idx in range(3):
        ranked.add_score(90.0 - idx, idx)
    assert list(deduplicate(pool, ranked)) == [0, 2]


def test_score_and_source_do_not_count():
    left = CandidateRecord({K.TITLE: "x", K.AUDIOID_SCORE: 90.0, K.AUDIOID_IDENT: 0})
    right = CandidateRecord({K.TITLE: "x", K.AUDIOID_SCORE: 80.0, K.AUDIOID_IDENT: 2})
    assert is_duplicate(left, right)
