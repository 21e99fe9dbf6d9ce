"""Browse the library like the app does: pick a vibe and root, lock a chord, play it.

Run with: python examples/board_session.py [output.wav]
"""

from __future__ import annotations

import sys

from chord_forge import ChordLibrary, TuningMode, VibeMode
from chord_forge.playback import PlaybackEngine
from chord_forge.session import ChordBoard


def main() -> None:
    """Walk through a short browsing session."""
    engine = PlaybackEngine(seed=0)
    board = ChordBoard(ChordLibrary(), vibe=VibeMode.DARK, engine=engine)

    board.select_root("D")
    board.set_tuning(TuningMode.DROP)
    for chord in board.displayed():
        sys.stdout.write(f"{chord.id:<18} {chord.subtext:<16} {chord.fretboard}\n")

    related = board.toggle_lock("drop-chug")
    sys.stdout.write(f"Locked drop-chug, {len(related)} related voicing(s)\n")

    engine.set_distortion(True)
    buffer = board.play("drop-chug")
    sys.stdout.write(f"Rendered {buffer.size} samples\n")

    if len(sys.argv) > 1:
        chord = next(c for c in board.displayed() if c.id == "drop-chug")
        path = engine.write_wav(sys.argv[1], chord.notes)
        sys.stdout.write(f"Wrote {path}\n")


if __name__ == "__main__":
    main()
