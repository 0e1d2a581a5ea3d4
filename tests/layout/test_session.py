"""
Unit tests for PaginationSession (last-write-wins background layout).
"""

import threading

import pytest

from journal_toolkit.core.models.paper import StructuredPaperData
from journal_toolkit.layout.session import PaginationSession
from journal_toolkit.measurement.oracle import MeasurementError, StaticOracle


def _fake_layout(data, config, oracle):
    """Stand-in layout function: returns the paper title so tests can tell passes apart."""
    return _Result(data.title)


class _Result:
    def __init__(self, title):
        self.title = title
        self.page_count = 1


def test_submit_when_single_pass_then_committed(default_config):
    # Arrange
    with PaginationSession(layout_fn=_fake_layout) as session:
        # Act
        result = session.submit(StructuredPaperData(title="v1"), default_config).result(timeout=5)

        # Assert
        assert result.title == "v1"
        assert session.current is result
        assert session.generation == 1


def test_submit_when_older_pass_finishes_last_then_not_committed(default_config):
    # Arrange
    release_first = threading.Event()

    def layout(data, config, oracle):
        if data.title == "old":
            release_first.wait(timeout=5)
        return _Result(data.title)

    with PaginationSession(layout_fn=layout, max_workers=2) as session:
        # Act
        old = session.submit(StructuredPaperData(title="old"), default_config)
        new = session.submit(StructuredPaperData(title="new"), default_config)
        new.result(timeout=5)
        release_first.set()
        old.result(timeout=5)

        # Assert
        assert session.current.title == "new"
        assert session.generation == 2


def test_submit_when_measurement_fails_then_previous_result_retained(default_config):
    # Arrange
    def layout(data, config, oracle):
        if data.title == "broken":
            raise MeasurementError("font missing", block_index=0)
        return _Result(data.title)

    with PaginationSession(layout_fn=layout) as session:
        good = session.submit(StructuredPaperData(title="good"), default_config).result(timeout=5)

        # Act
        retained = session.submit(StructuredPaperData(title="broken"), default_config).result(timeout=5)

        # Assert
        assert retained is good
        assert session.current is good
        assert session.generation == 1
        assert isinstance(session.last_error, MeasurementError)


def test_submit_when_committed_then_on_commit_called(default_config):
    seen = []

    with PaginationSession(layout_fn=_fake_layout, on_commit=seen.append) as session:
        session.submit(StructuredPaperData(title="v1"), default_config).result(timeout=5)

    assert [r.title for r in seen] == ["v1"]


def test_submit_when_default_layout_then_real_pipeline_runs(sample_paper, single_column_config):
    oracle = StaticOracle(100)

    with PaginationSession(oracle) as session:
        result = session.submit(sample_paper, single_column_config).result(timeout=30)

    assert result.page_count >= 1
    assert session.current is result


def test_submit_when_other_error_then_propagates(default_config):
    def layout(data, config, oracle):
        raise RuntimeError("bug")

    with PaginationSession(layout_fn=layout) as session:
        future = session.submit(StructuredPaperData(), default_config)

        with pytest.raises(RuntimeError):
            future.result(timeout=5)
        assert session.current is None
