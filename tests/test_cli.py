import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import json
from pathlib import Path

import pytest

from madeeasy.cli import build_parser, main
from madeeasy.utils.config import DEFAULT_CONFIG, ConfigError, load_config

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _json_output(capsys):
    return json.loads(capsys.readouterr().out)


class TestCLI:

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert 'usage' in capsys.readouterr().out.lower()

    def test_dft_json(self, capsys):
        assert main(['--json', 'dft', '(1,0), (0,-1), (2,3), (0,0)']) == 0
        records = _json_output(capsys)
        assert len(records) == 4
        assert records[0] == {'index': 0, 're': 3.0, 'im': 2.0, 'magnitude': 3.606, 'phase': 33.69}

    def test_fft_with_size(self, capsys):
        assert main(['--json', 'fft', '1, 2, 3', '-N', '8']) == 0
        assert len(_json_output(capsys)) == 8

    def test_table_output(self, capsys):
        assert main(['linear-conv', '1,2,3', '1,1']) == 0
        out = capsys.readouterr().out
        assert 'Linear Convolution' in out
        assert '5.000 + j0.000' in out

    def test_sample_name_and_defaults(self, capsys):
        assert main(['--json', 'dft', 'impulse']) == 0
        assert [r['re'] for r in _json_output(capsys)] == [1.0, 1.0, 1.0, 1.0]

        assert main(['--json', 'circular-conv']) == 0
        assert len(_json_output(capsys)) == 4

    def test_twiddle(self, capsys):
        assert main(['--json', 'twiddle', '1', '1', '4']) == 0
        result = _json_output(capsys)
        assert result['im'] == -1.0
        assert result['k'] == 1
        assert result['inverse'] is False

        assert main(['twiddle', '1', '1', '4', '--inverse']) == 0
        assert 'Twiddle Factor' in capsys.readouterr().out

    def test_block_convolution(self, capsys):
        assert main(['--json', 'overlap-save', '1,2,3,4,5', '1,1', '-N', '4']) == 0
        records = _json_output(capsys)
        assert [r['re'] for r in records[:6]] == [1.0, 3.0, 5.0, 7.0, 9.0, 5.0]

        assert main(['--json', 'overlap-add', '1,2,3,4,5', '1,1', '-N', '4']) == 0
        records = _json_output(capsys)
        assert [r['re'] for r in records[:6]] == [1.0, 3.0, 5.0, 7.0, 9.0, 5.0]

    def test_block_size_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['overlap-add', '1,2', '1'])

    def test_engine_errors_exit_2(self, capsys):
        assert main(['overlap-save', '1,2,3', '1,1,1,1', '-N', '2']) == 2
        assert 'failed' in capsys.readouterr().out

        assert main(['dft', '1,(2,3,4)']) == 2
        assert '(2,3,4)' in capsys.readouterr().out

        assert main(['dft', '']) == 2

    def test_samples_command(self, capsys):
        assert main(['samples']) == 0
        out = capsys.readouterr().out
        for name in DEFAULT_CONFIG['samples']:
            assert name in out

    def test_worker_timeout_option(self, capsys):
        assert main(['--timeout', '120', '--json', 'fft', '1,2,3,4']) == 0
        assert [r['re'] for r in _json_output(capsys)] == [10.0, -2.0, -2.0, -2.0]

    def test_log_file(self, tmp_path, capsys):
        log_file = tmp_path / 'logs' / 'run.log'
        assert main(['--log-file', str(log_file), 'fft', '1,2']) == 0
        text = log_file.read_text()
        assert 'Running FFT' in text
        assert 'FFT finished' in text

    def test_bad_config_exit_2(self, tmp_path, capsys):
        cfg = tmp_path / 'bad.yaml'
        cfg.write_text('runner:\n  timeout: -1\n')
        assert main(['--config', str(cfg), 'fft', '1,2']) == 2
        assert 'Config error' in capsys.readouterr().out


class TestConfig:

    def test_defaults(self):
        config = load_config()
        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_shipped_default_file(self):
        assert load_config(str(PROJECT_ROOT / 'configs' / 'default.yaml')) == DEFAULT_CONFIG

    def test_partial_override(self, tmp_path):
        cfg = tmp_path / 'cfg.yaml'
        cfg.write_text('precision:\n  decimals: 4\nsamples:\n  ramp: "1, 2, 3"\n')
        config = load_config(str(cfg))
        assert config['precision']['decimals'] == 4
        assert config['samples']['ramp'] == '1, 2, 3'
        assert config['samples']['impulse'] == DEFAULT_CONFIG['samples']['impulse']
        assert config['runner']['timeout'] is None

    def test_decimals_used_in_table(self, tmp_path, capsys):
        cfg = tmp_path / 'cfg.yaml'
        cfg.write_text('precision:\n  decimals: 1\n')
        assert main(['--config', str(cfg), 'linear-conv', '1,2,3', '1,1']) == 0
        assert '5.0 + j0.0' in capsys.readouterr().out

    @pytest.mark.parametrize('text', [
        'runner:\n  timeout: 0\n',
        'precision:\n  decimals: -1\n',
        'precision:\n  decimals: 2.5\n',
        'samples:\n  bad: 3\n',
        'logging:\n  level: LOUD\n',
        '- just\n- a list\n',
        'precision: [unclosed\n',
    ])
    def test_invalid_config(self, tmp_path, text):
        cfg = tmp_path / 'cfg.yaml'
        cfg.write_text(text)
        with pytest.raises(ConfigError):
            load_config(str(cfg))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(str(tmp_path / 'nope.yaml'))
