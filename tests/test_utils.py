"""Tests for pagination helpers."""

import pytest

from reminder_engine.utils import paginate

ITEMS = list(range(5))


@pytest.mark.parametrize(
    "offset, limit, expected",
    [
        (0, None, [0, 1, 2, 3, 4]),
        (1, 2, [1, 2]),
        (4, 10, [4]),
        (10, None, []),
        (0, 0, []),
        (0, -1, []),
        (-2, 2, [0, 1]),
    ],
)
def test_paginate(offset, limit, expected):
    assert paginate(ITEMS, offset, limit) == expected
