import pytest

from dartscore.services.games.checkout import format_checkout, suggest


def test_forty_master_out_one_dart_is_double_twenty():
    assert suggest(40, 1, 'master', False) == ('D20',)


@pytest.mark.parametrize('mode', ['open', 'master', 'double'])
def test_one_remaining_has_no_checkout(mode):
    for darts in (1, 2, 3):
        assert suggest(1, darts, mode, False) is None
        assert suggest(1, darts, mode, True) is None


def test_no_darts_left_means_no_suggestion():
    assert suggest(40, 0, 'double') is None


def test_large_scores_are_cut_off():
    assert suggest(150, 3, 'double') is None
    assert suggest(170, 3, 'double') is None
    assert suggest(170, 3, 'double', max_score=170) == ('T20', 'T20', 'BULL')
    assert suggest(170, 3, 'double', split_bull=True, max_score=170) == ('T20', 'T20', 'BULL50')


def test_double_out_final_dart_is_a_double():
    route = suggest(100, 2, 'double')
    assert route == ('T20', 'D20')
    assert suggest(3, 2, 'double') == ('S1', 'D1')
    assert suggest(3, 1, 'double') is None
    assert suggest(60, 1, 'double') is None


def test_master_out_allows_triples():
    assert suggest(60, 1, 'master') == ('T20',)


def test_open_out_allows_singles():
    assert suggest(20, 1, 'open') == ('S20',)


def test_equal_routes_prefer_the_wider_bed():
    # S3 and T1 both finish; the single is the bigger target
    assert suggest(3, 1, 'open') == ('S3',)
    assert suggest(40, 1, 'open') == ('D20',)


def test_fewest_darts_preferred():
    assert suggest(40, 3, 'double') == ('D20',)


def test_split_bull_options():
    assert suggest(50, 1, 'double', split_bull=True) == ('BULL50',)
    assert suggest(25, 1, 'double', split_bull=True) is None
    assert suggest(25, 1, 'master', split_bull=True) == ('BULL25',)
    assert suggest(25, 1, 'open', split_bull=True) == ('BULL25',)
    assert suggest(50, 1, 'double', split_bull=False) == ('BULL',)


def test_full_bull_single_finishes_only_outside_double_out():
    assert suggest(25, 1, 'master', split_bull=False) == ('S25',)
    assert suggest(25, 1, 'open', split_bull=False) == ('S25',)
    assert suggest(25, 1, 'double', split_bull=False) is None


def test_unknown_out_mode_has_no_suggestion():
    assert suggest(40, 1, 'sideways') is None


def test_format_checkout():
    assert format_checkout(('T20', 'D20')) == 'T20 D20'
    assert format_checkout(None) is None
