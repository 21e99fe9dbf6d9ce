import sys

from chord_forge import ChordLibrary, TuningMode, VibeMode, chord_symbol, transpose_chord

library = ChordLibrary()
ghost = library.find(TuningMode.STANDARD, VibeMode.DARK, "ghost")

# Same shape, new key and tuning
for root in ("E", "G", "C#"):
    for tuning in TuningMode:
        chord = transpose_chord(ghost, root, tuning)
        sys.stdout.write(
            f"{root:<3} {tuning.value:<9} {chord.subtext:<10} {chord.fretboard:<16} "
            f"{' '.join(chord.notes)}  [{chord_symbol(chord) or '?'}]\n"
        )

# Related voicings follow the parent's key
chord = transpose_chord(ghost, "A", TuningMode.STANDARD, include_related=True)
for related in chord.related_chords:
    sys.stdout.write(f"  {related.name}: {related.fretboard}\n")
