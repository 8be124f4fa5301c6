import logging

import numpy as np

from dietoy import Segment, build_homography
from dietoy.logging_utils import debug_log_call, summarize


def test_summarize_engine_values():
    assert summarize((1.0, 2.5)) == '(1, 2.5)'
    assert summarize(Segment((0.0, 0.0), (3.0, 4.0))) == 'Segment((0, 0) -> (3, 4))'
    assert summarize(np.zeros((10, 10))).startswith('ndarray(shape=(10, 10)')
    assert summarize(list(range(20))).endswith('... (20 items)]')


def test_debug_log_call_traces_entry_and_exit(caplog):
    logger = logging.getLogger('dietoy.tests.tracing')

    @debug_log_call(logger)
    def scale(point, factor=2.0):
        return (point[0] * factor, point[1] * factor)

    with caplog.at_level(logging.DEBUG, logger='dietoy.tests.tracing'):
        assert scale((1.0, 2.0), factor=3.0) == (3.0, 6.0)

    messages = [record.getMessage() for record in caplog.records]
    assert any('Entering' in m and 'factor=3' in m for m in messages)
    assert any('Exiting' in m and '(3, 6)' in m for m in messages)


def test_module_functions_are_traced(caplog):
    with caplog.at_level(logging.DEBUG, logger='dietoy.homography'):
        build_homography([(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)])

    assert any(record.getMessage().startswith('Entering build_homography') for record in caplog.records)
