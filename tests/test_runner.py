"""
Tests for the operation registry and the cancellable task runner.

Runner tests start real worker processes (spawn), so they are slower than
the engine tests.
"""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import numpy as np
import pytest

from madeeasy.dsp_core import InvalidSizeError, ParseError, TwiddleResult, ValidationError, dft
from madeeasy.operations import OPERATIONS, UnknownOperationError, get_operation, run_operation
from madeeasy.runner import (
    TaskCancelledError,
    TaskTimeoutError,
    TransformTask,
    run_with_timeout,
)

# Large enough that a direct linear convolution runs for many seconds
LONG_INPUT = np.ones(200_000)


class TestOperations:

    def test_registry_covers_all_engines(self):
        assert set(OPERATIONS) == {
            'dft', 'idft', 'fft', 'twiddle',
            'circular_conv', 'linear_conv', 'overlap_save', 'overlap_add',
        }
        for op_id, op in OPERATIONS.items():
            assert op.id == op_id
            assert callable(op.func)

    def test_unknown_operation(self):
        with pytest.raises(UnknownOperationError):
            get_operation('dct')
        with pytest.raises(KeyError):
            run_operation('dct', x=[1])

    def test_text_input_is_parsed(self):
        assert run_operation('dft', x='(1,0), (0,-1), (2,3), (0,0)', N=4) == dft(
            [1, -1j, 2 + 3j, 0], 4
        )

    def test_two_sequence_operation(self):
        y = run_operation('linear_conv', x='1,2,3', h='1,1')
        assert [r.re for r in y] == [1.0, 3.0, 5.0, 3.0]

    def test_twiddle(self):
        w = run_operation('twiddle', k=1, n=1, N=4, inverse=True)
        assert isinstance(w, TwiddleResult)
        assert w.im == 1.0

    def test_missing_inputs(self):
        with pytest.raises(ValidationError):
            run_operation('dft')
        with pytest.raises(ValidationError):
            run_operation('circular_conv', x='1,2')
        with pytest.raises(ValidationError):
            run_operation('twiddle', k=1, N=4)
        with pytest.raises(InvalidSizeError):
            run_operation('overlap_save', x='1,2,3', h='1,1')
        with pytest.raises(InvalidSizeError):
            run_operation('twiddle', k=1, n=1)

    def test_parse_errors_propagate(self):
        with pytest.raises(ParseError):
            run_operation('fft', x='1,(2,3,4)')


class TestTransformTask:

    def test_result(self):
        with TransformTask('dft', x=[1, -1j, 2 + 3j, 0], N=4) as task:
            records = task.result(timeout=120)
        assert records == dft([1, -1j, 2 + 3j, 0], 4)
        assert task.done()
        assert not task.cancelled()

    def test_result_is_cached(self):
        task = TransformTask('linear_conv', x='1,2', h='1,1')
        first = task.result(timeout=120)
        assert task.result() == first
        assert task.cancel() is False

    def test_engine_errors_are_reraised(self):
        with pytest.raises(ValidationError):
            TransformTask('dft', x=[]).result(timeout=120)

        with pytest.raises(InvalidSizeError) as excinfo:
            TransformTask('overlap_add', x='1,2,3', h='1,1,1', N=2).result(timeout=120)
        assert excinfo.value.size == 2

    def test_parse_error_keeps_token(self):
        with pytest.raises(ParseError) as excinfo:
            TransformTask('fft', x='1,(2').result(timeout=120)
        assert excinfo.value.token == '(2'

    def test_unknown_operation_fails_early(self):
        with pytest.raises(UnknownOperationError):
            TransformTask('wavelet', x=[1])

    def test_cancel(self):
        task = TransformTask('linear_conv', x=LONG_INPUT, h=LONG_INPUT).start()
        assert task.cancel() is True
        assert task.cancelled()
        assert task.done()
        with pytest.raises(TaskCancelledError):
            task.result()
        with pytest.raises(TaskCancelledError):
            task.start()

    def test_queue_closed_after_result_and_cancel(self):
        finished = TransformTask('fft', x='1,2,3,4')
        finished.result(timeout=120)
        with pytest.raises(ValueError):
            finished._queue.put(None)

        cancelled = TransformTask('linear_conv', x=LONG_INPUT, h=LONG_INPUT).start()
        cancelled.cancel()
        with pytest.raises(ValueError):
            cancelled._queue.put(None)

    def test_timeout(self):
        with pytest.raises(TaskTimeoutError):
            run_with_timeout('linear_conv', timeout=0.5, x=LONG_INPUT, h=LONG_INPUT)
