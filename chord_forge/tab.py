"""Guitar tab transposition and playability normalization.

A tab is a space separated list of fret positions, lowest string first
("0 2 2 x x x"). Each position is a fret number or "x" for a muted
string. This module shifts tabs between keys and tunings and then pulls
the fingering back within a hand span by moving strings by octaves.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from chord_forge.models import TuningMode
from chord_forge.pitch_class import SEMITONES_PER_OCTAVE

logger = logging.getLogger(__name__)

MUTED = "x"
STRING_COUNT = 6

# Semitones the lowest string is tuned down in drop tuning
DROP_OFFSET = 2

# A position is a fret number, the mute sentinel, or a malformed token kept as-is
FretPosition = int | str


@dataclass(frozen=True)
class PlayabilityPolicy:
    """Bounds a transposed fingering should respect.

    Parameters
    ----------
    max_span : int
        Largest allowed distance between the lowest and highest fretted
        positions (open strings count as fret 0).
    max_fret : int
        Highest comfortable fret.
    max_iterations : int
        Cap on octave-shift attempts before accepting a best-effort tab.

    Examples
    --------
    >>> policy = PlayabilityPolicy(max_span=4, max_fret=7)
    >>> policy.fits([3, 5, 5])
    True
    >>> policy.fits([0, 5, 7])
    False
    """

    max_span: int = 7
    max_fret: int = 8
    max_iterations: int = 16

    def __post_init__(self) -> None:
        """Validate policy bounds."""
        if self.max_span < 0:
            msg = f"max_span must be non-negative, got {self.max_span}"
            raise ValueError(msg)
        if self.max_fret < 0:
            msg = f"max_fret must be non-negative, got {self.max_fret}"
            raise ValueError(msg)
        if self.max_iterations <= 0:
            msg = f"max_iterations must be positive, got {self.max_iterations}"
            raise ValueError(msg)

    @classmethod
    def from_env(cls) -> PlayabilityPolicy:
        """Build a policy from CHORD_FORGE_* environment variables.

        Unset variables keep the defaults. Non-integer values raise ValueError.
        """
        defaults = cls()
        return cls(
            max_span=int(os.environ.get("CHORD_FORGE_MAX_SPAN", defaults.max_span)),
            max_fret=int(os.environ.get("CHORD_FORGE_MAX_FRET", defaults.max_fret)),
            max_iterations=int(os.environ.get("CHORD_FORGE_MAX_ITERATIONS", defaults.max_iterations)),
        )

    def fits(self, frets: list[int]) -> bool:
        """Check whether fretted positions are within span and position bounds."""
        if not frets:
            return True
        return max(frets) - min(frets) <= self.max_span and max(frets) <= self.max_fret


DEFAULT_POLICY = PlayabilityPolicy()


def parse_tab(text: str) -> list[FretPosition]:
    """Split tab text into positions.

    Integer tokens become ints, "x"/"X" becomes ``MUTED``, anything else
    is kept verbatim.

    Examples
    --------
    >>> parse_tab("0 2 2 X x ?")
    [0, 2, 2, 'x', 'x', '?']
    """
    positions: list[FretPosition] = []
    for token in text.split():
        if token.lower() == MUTED:
            positions.append(MUTED)
            continue
        try:
            positions.append(int(token))
        except ValueError:
            positions.append(token)
    return positions


def format_tab(positions: list[FretPosition]) -> str:
    """Join positions back into tab text.

    Examples
    --------
    >>> format_tab([3, 5, 5, "x", "x", "x"])
    '3 5 5 x x x'
    """
    return " ".join(str(position) for position in positions)


def fretted(positions: list[FretPosition]) -> dict[int, int]:
    """Map string index to fret number for every numeric position."""
    return {i: p for i, p in enumerate(positions) if isinstance(p, int)}


def tab_span(positions: list[FretPosition]) -> int:
    """Distance between the lowest and highest fretted positions (0 if none).

    Examples
    --------
    >>> tab_span([0, 2, 4, 0, 0, 0])
    4
    >>> tab_span(["x", "x", "x"])
    0
    """
    frets = list(fretted(positions).values())
    return max(frets) - min(frets) if frets else 0


def _outliers(frets: dict[int, int], policy: PlayabilityPolicy) -> list[int]:
    """Strings that break the span bound, or failing that the position bound."""
    low = min(frets.values())
    too_wide = [i for i, fret in frets.items() if fret - low > policy.max_span]
    if too_wide:
        return too_wide
    return [i for i, fret in frets.items() if fret > policy.max_fret]


def _excess(frets: dict[int, int], policy: PlayabilityPolicy) -> tuple[int, int, int]:
    """Ranking key for best-effort results: span excess, position excess, top fret."""
    values = list(frets.values())
    span = max(values) - min(values)
    top = max(values)
    return (max(0, span - policy.max_span), max(0, top - policy.max_fret), top)


def normalize_playability(
    positions: list[FretPosition],
    policy: PlayabilityPolicy = DEFAULT_POLICY,
) -> list[FretPosition]:
    """Move strings by octaves until the fingering fits the policy.

    Outlying strings are dropped an octave. When that would take one of
    them below the nut, the whole shape is raised an octave instead so
    the next pass has room to drop them. The search stops when the
    fingering fits, when a state repeats, or after
    ``policy.max_iterations`` moves; the best state seen is returned.

    Parameters
    ----------
    positions : list[FretPosition]
        Non-negative fret numbers, mutes and malformed tokens.
    policy : PlayabilityPolicy
        Span and position bounds.

    Returns
    -------
    list[FretPosition]
        New positions; muted and malformed entries are untouched.

    Examples
    --------
    >>> normalize_playability([11, 1, 1, "x", "x", "x"])
    [11, 13, 13, 'x', 'x', 'x']
    >>> normalize_playability([3, 5, 5, "x", "x", "x"])
    [3, 5, 5, 'x', 'x', 'x']
    """
    frets = fretted(positions)
    if not frets or policy.fits(list(frets.values())):
        return list(positions)

    best = frets
    seen = {tuple(frets.items())}
    for _ in range(policy.max_iterations):
        outliers = _outliers(frets, policy)
        if all(frets[i] - SEMITONES_PER_OCTAVE >= 0 for i in outliers):
            frets = {i: fret - SEMITONES_PER_OCTAVE if i in outliers else fret for i, fret in frets.items()}
        else:
            frets = {i: fret + SEMITONES_PER_OCTAVE for i, fret in frets.items()}

        if _excess(frets, policy) < _excess(best, policy):
            best = frets
        if policy.fits(list(frets.values())):
            break

        state = tuple(frets.items())
        if state in seen:
            logger.debug("No further octave adjustment for %s, keeping %s", format_tab(positions), best)
            break
        seen.add(state)
    else:
        logger.warning(
            "Playability search hit %d iterations for %s, keeping best effort",
            policy.max_iterations,
            format_tab(positions),
        )

    return [best.get(i, position) for i, position in enumerate(positions)]


def transpose_tab(
    tab: str | None,
    semitones: int,
    tuning_mode: TuningMode,
    *,
    policy: PlayabilityPolicy = DEFAULT_POLICY,
) -> str | None:
    """Re-fret a standard-tuning tab for a new key and tuning.

    Parameters
    ----------
    tab : str | None
        Tab text authored for standard tuning, lowest string first.
    semitones : int
        Signed key change; frets move the same way as the pitch.
    tuning_mode : TuningMode
        Target tuning. In drop tuning the lowest string sounds two
        semitones flat, so it is fretted two frets higher.
    policy : PlayabilityPolicy
        Span and position bounds for the final fingering.

    Returns
    -------
    str | None
        The new tab text; ``None`` or empty input is returned as given.

    Examples
    --------
    >>> transpose_tab("0 2 2 x x x", 3, TuningMode.STANDARD)
    '3 5 5 x x x'
    >>> transpose_tab("0 2 2 x x x", 0, TuningMode.DROP)
    '2 2 2 x x x'
    """
    if not tab:
        return tab

    positions = parse_tab(tab)
    if len(positions) != STRING_COUNT:
        logger.debug("Tab %r has %d positions, expected %d", tab, len(positions), STRING_COUNT)

    shifted: list[FretPosition] = []
    for index, position in enumerate(positions):
        if not isinstance(position, int):
            shifted.append(position)
            continue

        fret = position + semitones
        if tuning_mode is TuningMode.DROP and index == 0:
            fret += DROP_OFFSET
        while fret < 0:
            fret += SEMITONES_PER_OCTAVE
        shifted.append(fret)

    return format_tab(normalize_playability(shifted, policy))
