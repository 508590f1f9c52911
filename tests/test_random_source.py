"""Tests for keyed random streams."""

import numpy as np
import pytest

from depthsim import InvalidParameters, RandomSource


def test_same_domain_gives_identical_streams():
    source = RandomSource(7)
    a = source.stream("profile").random(5)
    b = source.stream("profile").random(5)
    np.testing.assert_array_equal(a, b)


def test_different_domains_are_independent():
    source = RandomSource(7)
    a = source.stream("profile").random(5)
    b = source.stream("depth").random(5)
    assert not np.array_equal(a, b)


def test_cell_streams_do_not_depend_on_call_order():
    source = RandomSource(7)
    forward = [source.cell_stream(i).random() for i in range(4)]
    backward = [source.cell_stream(i).random() for i in reversed(range(4))]
    assert forward == backward[::-1]
    assert len(set(forward)) == 4


def test_different_seeds_differ():
    a = RandomSource(1).cell_stream(0).random(3)
    b = RandomSource(2).cell_stream(0).random(3)
    assert not np.array_equal(a, b)


def test_negative_seed_and_index_rejected():
    with pytest.raises(InvalidParameters):
        RandomSource(-1)
    with pytest.raises(InvalidParameters):
        RandomSource(0).cell_stream(-1)
