import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import math

import numpy as np
import pytest

from madeeasy.dsp_core import (
    ParseError,
    ResultRecord,
    ValidationError,
    as_sequence,
    format_complex,
    parse_sequence,
    resize,
    round_to,
)
from madeeasy.dsp_core.parsing import split_tokens


class TestParseSequence:

    def test_real_values(self):
        np.testing.assert_array_equal(parse_sequence("1,2,3"), [1 + 0j, 2 + 0j, 3 + 0j])

    def test_complex_pairs(self):
        np.testing.assert_array_equal(parse_sequence("(1,2),(3,-4)"), [1 + 2j, 3 - 4j])

    def test_empty(self):
        assert parse_sequence("").size == 0
        assert parse_sequence("   ").size == 0
        assert parse_sequence(None).size == 0

    def test_whitespace_and_mixed_tokens(self):
        x = parse_sequence("  ( 1 , 2 ) ,\t3 , -1.5e1 ")
        np.testing.assert_array_equal(x, [1 + 2j, 3 + 0j, -15 + 0j])
        assert x.dtype == np.complex128

    def test_empty_tokens_skipped(self):
        np.testing.assert_array_equal(parse_sequence("1,,2,"), [1, 2])

    def test_split_respects_parentheses(self):
        assert split_tokens("(1,2),3,(4,5)") == ["(1,2)", "3", "(4,5)"]

    @pytest.mark.parametrize('text,token', [
        ("(1,2,3)", "(1,2,3)"),
        ("(1)", "(1)"),
        ("1,abc", "abc"),
        ("(1,x)", "(1,x)"),
        ("(,2)", "(,2)"),
        ("1,(2", "(2"),
        ("nan", "nan"),
        ("(1,inf)", "(1,inf)"),
    ])
    def test_malformed_token(self, text, token):
        with pytest.raises(ParseError) as excinfo:
            parse_sequence(text)
        assert excinfo.value.token == token
        assert token in str(excinfo.value)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_sequence("1,2,three")


class TestSequenceModel:

    def test_as_sequence_pairs(self):
        x = as_sequence([(1, 0), (0, -1), (2, 3)])
        np.testing.assert_array_equal(x, [1, -1j, 2 + 3j])

    def test_as_sequence_records(self):
        records = [
            ResultRecord(index=0, re=1.0, im=2.0, magnitude=2.236, phase=63.435),
            ResultRecord(index=1, re=-1.0, im=0.0, magnitude=1.0, phase=180.0),
        ]
        np.testing.assert_array_equal(as_sequence(records), [1 + 2j, -1])

    def test_as_sequence_copies(self):
        x = np.array([1.0, 2.0])
        y = as_sequence(x)
        y[0] = 5
        assert x[0] == 1.0

    @pytest.mark.parametrize('bad', [[], np.zeros((2, 3)), "1,2", [1, float('inf')], ["a", "b"]])
    def test_as_sequence_rejects(self, bad):
        with pytest.raises(ValidationError):
            as_sequence(bad)

    def test_resize(self):
        x = np.array([1, 2, 3], dtype=complex)
        np.testing.assert_array_equal(resize(x, 5), [1, 2, 3, 0, 0])
        np.testing.assert_array_equal(resize(x, 2), [1, 2])
        assert resize(x, 3) is not x

    def test_round_to(self):
        assert round_to(1.23456) == 1.235
        assert round_to(-1.23456) == -1.235
        assert round_to(2.0) == 2.0
        # tiny negatives become +0.0, never -0.0
        assert math.copysign(1.0, round_to(-0.0001)) == 1.0

    def test_format_complex(self):
        assert format_complex(1.5, -0.5) == "1.500 - j0.500"
        assert format_complex(0, 2) == "0.000 + j2.000"
        assert format_complex(1, 1, decimals=1) == "1.0 + j1.0"
