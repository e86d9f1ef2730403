"""
Command-line interface for madeeasy.

Usage:
    madeeasy dft "(1,0), (0,-1), (2,3), (0,0)"
    madeeasy fft "1, 2, 3" -N 8
    madeeasy twiddle 1 2 8 --inverse
    madeeasy overlap-save "1,2,3,4,5,6,7" "1,1,1" -N 4
    madeeasy --json linear-conv "1,2,3" "1,-1"
"""

import argparse
import sys
import time
from dataclasses import asdict
from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .dsp_core import DSPError, ResultRecord, TwiddleResult, format_complex
from .operations import Operation, get_operation, run_operation
from .runner import run_with_timeout
from .utils.config import ConfigError, load_config
from .utils.logging import setup_logging

# Initialize rich console
console = Console()

# sub-command -> operation id
COMMANDS = {
    'dft': 'dft',
    'idft': 'idft',
    'fft': 'fft',
    'twiddle': 'twiddle',
    'circular-conv': 'circular_conv',
    'linear-conv': 'linear_conv',
    'overlap-save': 'overlap_save',
    'overlap-add': 'overlap_add',
}


def _number(text: str):
    """argparse type: int when integral, float otherwise."""
    value = float(text)
    return int(value) if value.is_integer() else value


def display_results_table(op: Operation, records: List[ResultRecord], decimals: int):
    """Display result records in a formatted table."""
    index_label = 'k' if op.output == 'frequency' else 'n'
    table = Table(
        title=f"[bold]{op.full_name}[/bold] ({len(records)} samples)",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan"
    )

    table.add_column(index_label, justify="right", style="bold")
    table.add_column("Re", justify="right")
    table.add_column("Im", justify="right")
    table.add_column("|X|", justify="right")
    table.add_column("Phase (°)", justify="right")
    table.add_column("Value", justify="left")

    for r in records:
        table.add_row(
            str(r.index),
            f"{r.re:.{decimals}f}",
            f"{r.im:.{decimals}f}",
            f"{r.magnitude:.{decimals}f}",
            f"{r.phase:.{decimals}f}",
            format_complex(r.re, r.im, decimals),
        )

    console.print(table)


def display_twiddle(result: TwiddleResult, decimals: int):
    sign = '+' if result.inverse else '-'
    console.print(Panel.fit(
        f"[bold]W = e^({sign}j·2π·{result.k}·{result.n}/{result.N})[/bold]\n"
        f"angle     = {result.angle:.6f} rad ({result.phase:.{decimals}f}°)\n"
        f"value     = {format_complex(result.re, result.im, decimals)}\n"
        f"magnitude = {result.magnitude}",
        title="Twiddle Factor",
        border_style="blue"
    ))


def display_samples(samples: Dict[str, str]):
    table = Table(title="[bold]Sample sequences[/bold]", box=box.ROUNDED, header_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("Sequence")
    for name, text in samples.items():
        table.add_row(name, text)
    console.print(table)


def _execute(op_id: str, timeout: Optional[float], **kwargs):
    if timeout is None:
        return run_operation(op_id, **kwargs)
    return run_with_timeout(op_id, timeout=timeout, **kwargs)


def _operation_kwargs(args, config: Dict) -> Dict:
    defaults = config.get('defaults', {})
    samples = config.get('samples', {})

    def resolve(text, fallback):
        if text is None:
            text = fallback
        # a configured sample name can stand in for the sequence text
        return samples.get(text, text)

    if args.command == 'twiddle':
        return {'k': args.k, 'n': args.n, 'N': args.N, 'inverse': args.inverse}

    kwargs = {'x': resolve(args.x, defaults.get('sequence'))}
    if hasattr(args, 'h'):
        kwargs['h'] = resolve(args.h, defaults.get('second_sequence'))
    if hasattr(args, 'N'):
        kwargs['N'] = args.N
    return kwargs


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Construct and return the top-level :class:`ArgumentParser`."""
    parser = argparse.ArgumentParser(
        prog="madeeasy",
        description="DFT, FFT and convolution calculator for short complex sequences.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", default=None, help="YAML config file (default: built-in settings)")
    parser.add_argument("--log-file", default=None, help="write a detailed log to this file")
    parser.add_argument("--timeout", type=float, default=None,
                        help="run in a worker process and cancel after this many seconds")
    parser.add_argument("--json", action="store_true", help="print results as JSON")

    sub = parser.add_subparsers(dest="command", help="operation")

    seq_help = 'sequence such as "1, 2, 3" or "(1,0), (0,-1)", or a sample name'

    for name, help_text in (
        ('dft', 'Discrete Fourier Transform'),
        ('idft', 'Inverse Discrete Fourier Transform'),
        ('fft', 'Fast Fourier Transform'),
    ):
        p = sub.add_parser(name, help=help_text, description=help_text)
        p.add_argument("x", nargs="?", default=None, help=seq_help)
        p.add_argument("-N", "--size", dest="N", type=int, default=None,
                       help="transform size (default: sequence length)")

    p_tw = sub.add_parser("twiddle", help="Twiddle factor W_N^kn",
                          description="Evaluate the twiddle factor e^(-j2πkn/N).")
    p_tw.add_argument("k", type=_number, help="frequency index k")
    p_tw.add_argument("n", type=_number, help="time index n")
    p_tw.add_argument("N", type=int, help="transform size N")
    p_tw.add_argument("--inverse", action="store_true", help="use e^(+j2πkn/N)")

    p_cc = sub.add_parser("circular-conv", help="Circular convolution")
    p_cc.add_argument("x", nargs="?", default=None, help=seq_help)
    p_cc.add_argument("h", nargs="?", default=None, help=seq_help)
    p_cc.add_argument("-N", "--size", dest="N", type=int, default=None,
                      help="period (default: longer sequence length)")

    p_lc = sub.add_parser("linear-conv", help="Linear convolution")
    p_lc.add_argument("x", nargs="?", default=None, help=seq_help)
    p_lc.add_argument("h", nargs="?", default=None, help=seq_help)

    for name, help_text in (
        ('overlap-save', 'Overlap-save block convolution'),
        ('overlap-add', 'Overlap-add block convolution'),
    ):
        p = sub.add_parser(name, help=help_text, description=help_text)
        p.add_argument("x", help="input signal")
        p.add_argument("h", help="impulse response")
        p.add_argument("-N", "--size", dest="N", type=int, required=True,
                       help="block size N (>= impulse response length)")

    sub.add_parser("samples", help="List configured sample sequences")

    return parser


def main(argv=None) -> int:
    """Entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        console.print(f"[bold red]✗ Config error:[/bold red] {exc}")
        return 2

    logger = setup_logging(
        log_file=args.log_file or config['logging']['file'],
        level=config['logging']['level'],
        name='madeeasy',
    )

    if args.command == 'samples':
        display_samples(config['samples'])
        return 0

    op = get_operation(COMMANDS[args.command])
    timeout = args.timeout if args.timeout is not None else config['runner']['timeout']
    decimals = config['precision']['decimals']
    kwargs = _operation_kwargs(args, config)

    logger.info(f"Running {op.name} with {kwargs}")
    start = time.time()
    try:
        result = _execute(op.id, timeout, **kwargs)
    except DSPError as exc:
        logger.info(f"{op.name} failed: {type(exc).__name__}: {exc}")
        console.print(f"[bold red]✗ {op.name} failed:[/bold red] {exc}")
        return 2
    logger.info(f"{op.name} finished in {time.time() - start:.3f}s")

    if args.json:
        if isinstance(result, TwiddleResult):
            console.print_json(data=asdict(result))
        else:
            console.print_json(data=[asdict(r) for r in result])
    elif isinstance(result, TwiddleResult):
        display_twiddle(result, decimals)
    else:
        display_results_table(op, result, decimals)
    return 0


if __name__ == "__main__":
    sys.exit(main())
