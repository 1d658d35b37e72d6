"""Percentage shown to polling clients."""

import pytest

from paneo.models.copy import CopyProgress, CopyStatus


@pytest.mark.parametrize("processed,total,expected", [
    (0, 0, None),
    (0, 3, 0),
    (1, 3, 33),
    (2, 3, 67),
    (3, 3, 100),
    (5, 3, 100),
])
def test_percent(processed, total, expected):
    assert CopyProgress(processed_files=processed, total_files=total).percent == expected


def test_percent_serialized():
    assert CopyProgress(processed_files=1, total_files=2).model_dump()["percent"] == 50


def test_terminal_statuses():
    assert not CopyStatus.RUNNING.is_terminal
    assert all(s.is_terminal for s in (CopyStatus.COMPLETED, CopyStatus.FAILED, CopyStatus.CANCELED))
