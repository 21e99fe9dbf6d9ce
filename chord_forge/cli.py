"""Command line interface for browsing, transposing and rendering chords.

Run ``chord-forge --help`` for usage. Examples::

    chord-forge list --tuning drop --vibe dark
    chord-forge transpose --root G --vibe energetic --json
    chord-forge render ghost --root A --output ghost_a.wav --dirty
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from chord_forge.converter import chord_symbol
from chord_forge.library import ChordLibrary, chord_to_dict
from chord_forge.models import Chord, TuningMode, VibeMode
from chord_forge.pitch_class import NOTES
from chord_forge.playback import PlaybackEngine
from chord_forge.tab import PlayabilityPolicy
from chord_forge.transpose import transpose_chord


def _tuning(value: str) -> TuningMode:
    try:
        return TuningMode[value.upper()]
    except KeyError:
        msg = f"invalid tuning {value!r} (choose from {', '.join(m.value.lower() for m in TuningMode)})"
        raise argparse.ArgumentTypeError(msg) from None


def _vibe(value: str) -> VibeMode:
    try:
        return VibeMode[value.upper()]
    except KeyError:
        msg = f"invalid vibe {value!r} (choose from {', '.join(m.value.lower() for m in VibeMode)})"
        raise argparse.ArgumentTypeError(msg) from None


def _format_row(chord: Chord) -> str:
    symbol = chord_symbol(chord) or "?"
    return (
        f"{chord.id:<22} {chord.name:<22} {chord.subtext:<20} {symbol:<8} "
        f"{chord.fretboard or '-':<14} {' '.join(chord.notes)}"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="chord-forge",
        description="Transpose guitar chord voicings to any root and tuning",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--library", default=None, help="Chord library JSON (default: bundled)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_selection(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--tuning", type=_tuning, default=TuningMode.STANDARD, help="standard or drop")
        sub.add_argument("--vibe", type=_vibe, default=VibeMode.MELODIC, help="dark, melodic or energetic")

    list_parser = subparsers.add_parser("list", help="List base chords in a category")
    add_selection(list_parser)

    transpose_parser = subparsers.add_parser("transpose", help="Transpose a category to a root")
    add_selection(transpose_parser)
    transpose_parser.add_argument("--root", required=True, choices=NOTES, help="Target root")
    transpose_parser.add_argument(
        "--rewrite-name", action="store_true", help="Also rewrite a leading root in chord names"
    )
    transpose_parser.add_argument("--related", action="store_true", help="Include related chords")
    transpose_parser.add_argument("--json", action="store_true", help="Output JSON")

    render_parser = subparsers.add_parser("render", help="Render a transposed chord to WAV")
    add_selection(render_parser)
    render_parser.add_argument("chord_id", help="Chord id (see 'list')")
    render_parser.add_argument("--root", required=True, choices=NOTES, help="Target root")
    render_parser.add_argument("--output", "-o", required=True, help="Output WAV path")
    render_parser.add_argument("--dirty", action="store_true", help="Use the distorted channel")
    render_parser.add_argument("--seed", type=int, default=None, help="Seed for velocity randomization")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    library = ChordLibrary(args.library)
    try:
        chords = library.get_chords(args.tuning, args.vibe)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "list":
        for chord in chords:
            print(_format_row(chord))
        return 0

    policy = PlayabilityPolicy.from_env()

    if args.command == "transpose":
        transposed = [
            transpose_chord(
                chord,
                args.root,
                args.tuning,
                rewrite_name_root=args.rewrite_name,
                include_related=args.related,
                policy=policy,
            )
            for chord in chords
        ]
        if args.json:
            print(json.dumps([chord_to_dict(chord) for chord in transposed], indent=2))
            return 0
        for chord in transposed:
            print(_format_row(chord))
            for child in chord.related_chords:
                print("  " + _format_row(child))
        return 0

    # render
    chord = library.find(args.tuning, args.vibe, args.chord_id)
    if chord is None:
        print(f"Error: no chord {args.chord_id!r} in {args.tuning.value}/{args.vibe.value}", file=sys.stderr)
        return 2
    transposed = transpose_chord(chord, args.root, args.tuning, policy=policy)
    engine = PlaybackEngine(seed=args.seed)
    engine.set_distortion(args.dirty)
    path = engine.write_wav(args.output, transposed.notes)
    print(f"{transposed.name} ({transposed.subtext}) {' '.join(transposed.notes)} -> {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
