"""
Command-line interface for qmatrix.

Usage:
    qmatrix run HZ
    qmatrix run "H, S†, T" --polar
    qmatrix export HXZ -o state.json
    qmatrix verify state.json
    qmatrix gates
    qmatrix serve --port 8888
"""
import argparse
import re
import sys

from ..errors import QMatrixError

_TOKEN_SPLIT = re.compile(r"[\s,]+")
_DAGGER = "†"
_SYMBOL = re.compile(r".†?")


def parse_sequence(text):
    """
    Parse a gate sequence given on the command line.

    A plain share code (``"HZX"``) is decoded character by character with
    unknown characters dropped. A code containing ``†`` (``"HS†T"``) is
    split into symbols and every symbol must be valid. Comma- or
    space-separated tokens (``"H, sdg, T"``) are looked up one by one and
    must all be valid.
    """
    from ..gates import gate_id
    from ..sharing import decode_sequence

    text = text.strip()
    if not _TOKEN_SPLIT.search(text):
        if _DAGGER not in text:
            return decode_sequence(text)
        return [gate_id(symbol) for symbol in _SYMBOL.findall(text)]
    return [gate_id(token) for token in _TOKEN_SPLIT.split(text) if token]


def _session(args, sequence):
    from ..config import LabConfig
    from ..session import Session

    config = LabConfig.from_env()
    if getattr(args, 'tolerance', None) is not None:
        config = LabConfig(
            tolerance=args.tolerance,
            history_capacity=config.history_capacity,
            precision=config.precision,
            log_level=config.log_level,
        )
    session = Session(config)
    session.add_gates(parse_sequence(sequence))
    return session


def format_report(session, precision=4, polar=False):
    """Render the state, composite and statistics as plain text."""
    report = session.report()
    fmt = (lambda c: c.to_polar_string(precision)) if polar else (lambda c: c.to_string(precision))
    seq = ' '.join(gate.value for gate in session.state.gate_sequence) or '(none)'

    lines = [f"Sequence: {seq}", "", "State vector:"]
    for label, amp in zip(('0', '1'), report.state):
        lines.append(f"  |{label}⟩: {fmt(amp)}")

    cells = [[fmt(c) for c in row] for row in report.composite]
    width = max(len(c) for row in cells for c in row)
    lines += ["", "Composite matrix:"]
    for row in cells:
        lines.append("  [ " + "  ".join(c.rjust(width) for c in row) + " ]")
    lines.append(f"  det = {fmt(report.determinant)}   tr = {fmt(report.trace)}")

    lines += ["", "Probabilities:"]
    for label, p in (('0', report.probabilities.prob0), ('1', report.probabilities.prob1)):
        bar = '█' * int(p * 40)
        lines.append(f"  |{label}⟩: {p * 100:6.2f}% {bar}")

    yes_no = lambda ok: 'yes' if ok else 'NO'
    lines += [
        "",
        f"Entropy: {report.entropy:.{precision}f} bits   Purity: {report.purity:.{precision}f}",
        f"Bloch:   θ = {report.bloch.theta:.{precision}f}   φ = {report.bloch.phi:.{precision}f}",
        f"Normalized: {yes_no(report.is_normalized)}   Unitary: {yes_no(report.is_unitary)}"
        f"   (tolerance {report.tolerance:g})",
    ]
    return '\n'.join(lines)


def cmd_run(args):
    """Apply a gate sequence and print the result."""
    session = _session(args, args.sequence)
    precision = args.precision if args.precision is not None else session.config.precision
    print(format_report(session, precision=precision, polar=args.polar))
    return 0


def cmd_export(args):
    """Write the export record for a gate sequence."""
    from ..export import dumps

    session = _session(args, args.sequence)
    text = dumps(session.export())
    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            f.write(text)
        print(f"Wrote {len(session.state)} operations to {args.output}")
    else:
        print(text)
    return 0


def cmd_verify(args):
    """Check an export record against its own state and matrix."""
    from ..export import load, verify_record

    record = load(args.file)
    problems = verify_record(record, tolerance=args.tolerance)
    if problems:
        print(f"{args.file}: {len(problems)} mismatch(es)")
        for p in problems:
            print(f"  - {p}")
        return 1
    ops = ''.join(record['operations']) or '(none)'
    print(f"{args.file}: OK ({ops})")
    return 0


def cmd_gates(args):
    """List the gate registry."""
    from ..gates import GATE_REGISTRY

    for info in GATE_REGISTRY.values():
        flags = []
        if info.hermitian:
            flags.append('hermitian')
        if info.self_inverse:
            flags.append('self-inverse')
        print(f"  {info.symbol:<3} {info.description}")
        if flags:
            print(f"      ({', '.join(flags)})")
    return 0


def cmd_serve(args):
    """Launch the dashboard API server."""
    from ..dashboard import launch

    launch(port=args.port, host=args.host, debug=args.debug)
    return 0


def cmd_info(args):
    """Show qmatrix information."""
    from .. import __version__

    print(f"""
qmatrix v{__version__}
━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

Exact single-qubit gate composition.

Gates: H X Y Z S T S† T†

Usage:
  qmatrix run HZ
  qmatrix run "H, sdg, T" --polar
  qmatrix export HXZ -o state.json
  qmatrix verify state.json
  qmatrix serve
""")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog='qmatrix',
        description='Single-qubit gate composer'
    )
    parser.add_argument('--log-level', default=None,
                        help='Logging level (DEBUG, INFO, WARNING, ...)')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Run command
    run_parser = subparsers.add_parser('run', help='Apply a gate sequence')
    run_parser.add_argument('sequence', help='Share code ("HZX") or list ("H, sdg, T")')
    run_parser.add_argument('--precision', type=int, default=None, help='Decimal places')
    run_parser.add_argument('--polar', action='store_true', help='Print amplitudes in polar form')
    run_parser.add_argument('--tolerance', type=float, default=None, help='Validation tolerance')
    run_parser.set_defaults(func=cmd_run)

    # Export command
    export_parser = subparsers.add_parser('export', help='Export state as JSON')
    export_parser.add_argument('sequence', help='Share code or gate list')
    export_parser.add_argument('-o', '--output', help='Output file (default: stdout)')
    export_parser.add_argument('--tolerance', type=float, default=None, help='Validation tolerance')
    export_parser.set_defaults(func=cmd_export)

    # Verify command
    verify_parser = subparsers.add_parser('verify', help='Verify an export file')
    verify_parser.add_argument('file', help='Export JSON file')
    verify_parser.add_argument('--tolerance', type=float, default=None,
                               help='Override the stored tolerance')
    verify_parser.set_defaults(func=cmd_verify)

    # Gates command
    gates_parser = subparsers.add_parser('gates', help='List available gates')
    gates_parser.set_defaults(func=cmd_gates)

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Run the dashboard API')
    serve_parser.add_argument('--host', default='127.0.0.1', help='Host address')
    serve_parser.add_argument('--port', type=int, default=8888, help='Port')
    serve_parser.add_argument('--debug', action='store_true', help='Flask debug mode')
    serve_parser.set_defaults(func=cmd_serve)

    # Info command
    info_parser = subparsers.add_parser('info', help='Show qmatrix info')
    info_parser.set_defaults(func=cmd_info)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    from ..config import LabConfig
    from ..logging import apply_config, set_log_level

    try:
        if args.log_level:
            set_log_level(args.log_level)
        else:
            apply_config(LabConfig.from_env())
        return args.func(args)
    except (QMatrixError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == '__main__':
    sys.exit(main())
