#!/usr/bin/env python3
"""Report how the chord library fingers in every key and tuning.

For each chord (related voicings included), each of the 12 roots and both
tunings, the library chord is transposed and its tab checked against the
playability policy. Shapes that cannot be brought under the bounds are
listed as best-effort results and can be written to JSON.
"""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass
from itertools import product
from pathlib import Path
from typing import TYPE_CHECKING

from chord_forge import ChordLibrary, PlayabilityPolicy, transpose_chord
from chord_forge.pitch_class import NOTES
from chord_forge.tab import fretted, parse_tab

if TYPE_CHECKING:
    from collections.abc import Iterator

    from chord_forge import Chord


@dataclass(frozen=True)
class ReportEntry:
    """A transposed tab that misses a playability bound."""

    chord_id: str
    root: str
    tuning: str
    fretboard: str
    span: int
    max_fret: int


def _walk(chords: tuple[Chord, ...]) -> Iterator[Chord]:
    for chord in chords:
        yield chord
        yield from _walk(chord.related_chords)


def build_report(library: ChordLibrary, policy: PlayabilityPolicy) -> tuple[int, list[ReportEntry]]:
    """Transpose everything and collect entries that miss a bound.

    Returns
    -------
    tuple[int, list[ReportEntry]]
        Number of tabs checked and the best-effort entries.
    """
    checked = 0
    misses: list[ReportEntry] = []
    for tuning, vibe in library.categories():
        for chord, root in product(_walk(library.get_chords(tuning, vibe)), NOTES):
            result = transpose_chord(chord, root, tuning, policy=policy)
            if not result.fretboard:
                continue
            checked += 1
            frets = list(fretted(parse_tab(result.fretboard)).values())
            if policy.fits(frets):
                continue
            misses.append(
                ReportEntry(
                    chord_id=chord.id,
                    root=root,
                    tuning=tuning.value,
                    fretboard=result.fretboard,
                    span=max(frets) - min(frets),
                    max_fret=max(frets),
                )
            )
    return checked, misses


def main() -> None:
    """Run the playability report."""
    defaults = PlayabilityPolicy()
    parser = argparse.ArgumentParser(description="Check chord library playability in every key")
    parser.add_argument("--library", type=Path, default=None, help="Chord library JSON")
    parser.add_argument("--output", type=Path, default=None, help="Write best-effort entries to JSON")
    parser.add_argument("--max-span", type=int, default=defaults.max_span)
    parser.add_argument("--max-fret", type=int, default=defaults.max_fret)
    args = parser.parse_args()

    policy = PlayabilityPolicy(max_span=args.max_span, max_fret=args.max_fret)
    checked, misses = build_report(ChordLibrary(args.library), policy)

    for entry in misses:
        print(
            f"{entry.tuning:<9} {entry.root:<3} {entry.chord_id:<22} {entry.fretboard:<16} "
            f"span={entry.span} max={entry.max_fret}"
        )
    print(f"{len(misses)} of {checked} tabs are best-effort (span <= {policy.max_span}, fret <= {policy.max_fret})")

    if args.output:
        payload = {
            "policy": asdict(policy),
            "checked": checked,
            "best_effort": [asdict(entry) for entry in misses],
        }
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote report to {args.output.resolve()}")


if __name__ == "__main__":
    main()
