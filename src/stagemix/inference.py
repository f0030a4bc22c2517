"""Guess an input source from a free-text console channel name."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from stagemix.domain.sources import InputSource


def _has(*needles: str) -> Callable[[str], bool]:
    """Match when every needle appears in the label."""

    return lambda label: all(needle in label for needle in needles)


def _any(*needles: str) -> Callable[[str], bool]:
    return lambda label: any(needle in label for needle in needles)


def _overhead(*sides: str) -> Callable[[str], bool]:
    """Match "OH L", "OH-R", "OHL" or "Overheads Right" style labels without hitting words like "John"."""

    def matches(label: str) -> bool:
        tokens = re.findall(r"[a-z0-9]+", label)
        if any(token in {f"oh{side}" for side in sides} for token in tokens):
            return True
        named = any(token in {"oh", "overhead", "overheads"} for token in tokens)
        return named and any(side in tokens for side in sides)

    return matches


@dataclass(frozen=True, slots=True)
class InferenceRule:
    name: str
    matches: Callable[[str], bool]
    source: InputSource


# First match wins, so narrower rules must precede the broader ones they overlap
# ("click" before "track", "floor tom" before "tom", "lead voc" before "voc").
INFERENCE_RULES: tuple[InferenceRule, ...] = (
    InferenceRule("kick", _has("kick"), InputSource.KICK),
    InferenceRule("snare", _has("snare"), InputSource.SNARE),
    InferenceRule("hi-hat", _any("hat", "hh"), InputSource.HI_HAT),
    InferenceRule("overhead-left", _overhead("l", "left"), InputSource.OVERHEAD_LEFT),
    InferenceRule("overhead-right", _overhead("r", "right"), InputSource.OVERHEAD_RIGHT),
    InferenceRule("overhead", _has("overhead"), InputSource.OVERHEAD_LEFT),
    InferenceRule("floor-tom", lambda label: "tom" in label and ("floor" in label or "fl" in label), InputSource.TOM_FLOOR),
    InferenceRule("high-tom", _has("tom", "hi"), InputSource.TOM_HIGH),
    InferenceRule("tom", _has("tom"), InputSource.TOM_MID),
    InferenceRule("lead-vocal", _has("lead", "voc"), InputSource.LEAD_VOCAL),
    InferenceRule("backing-vocal", _any("bv", "back"), InputSource.BACKING_VOCAL),
    InferenceRule("vocal", _has("voc"), InputSource.LEAD_VOCAL),
    InferenceRule("keys", _any("keys", "piano", "kb"), InputSource.DIGITAL_PIANO),
    InferenceRule(
        "electric-guitar",
        lambda label: "e.gtr" in label or ("elec" in label and "gtr" in label),
        InputSource.ELECTRIC_GUITAR_MODELER,
    ),
    InferenceRule(
        "acoustic-guitar",
        lambda label: "a.gtr" in label or ("acou" in label and "gtr" in label),
        InputSource.ACOUSTIC_GUITAR_DI,
    ),
    InferenceRule("bass", _has("bass"), InputSource.BASS_DI),
    InferenceRule("click", _has("click"), InputSource.CLICK_TRACK),
    InferenceRule("tracks", _has("track"), InputSource.TRACKS_LEFT),
    InferenceRule("speech", _any("pastor", "speak"), InputSource.PASTOR_HANDHELD),
)


def matching_rule(label: str) -> InferenceRule | None:
    """Return the first rule that claims ``label``, or ``None``."""

    normalized = str(label).strip().lower()
    if not normalized:
        return None
    for rule in INFERENCE_RULES:
        if rule.matches(normalized):
            return rule
    return None


def infer(label: str) -> InputSource | None:
    """Classify a channel label into an input source; ``None`` when unrecognized."""

    rule = matching_rule(label)
    return rule.source if rule is not None else None
