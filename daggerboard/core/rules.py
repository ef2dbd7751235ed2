"""Numeric game rules: clamping, damage thresholds and stress overflow.

Pure functions over plain integers so they can be reasoned about (and
tested) without a database.
"""

from dataclasses import dataclass

from ..enums import ThresholdHit

# Stress cap used when an entity has no stress_max of its own
DEFAULT_STRESS_CAP = 12

# HP lost for each threshold tier
HP_LOSS_BY_TIER = {
    ThresholdHit.MASSIVE: 4,
    ThresholdHit.SEVERE: 3,
    ThresholdHit.MAJOR: 2,
    ThresholdHit.MINOR: 1,
}


def clamp(value: int, low: int, high: int) -> int:
    """Clamp value into [low, high]. A high below low yields low."""
    return max(low, min(value, high))


def classify_damage(damage: int, minor: int, major: int, severe: int) -> ThresholdHit | None:
    """Return the most severe tier the damage reaches, or None."""
    if damage >= severe * 2:
        return ThresholdHit.MASSIVE
    if damage >= severe:
        return ThresholdHit.SEVERE
    if damage >= major:
        return ThresholdHit.MAJOR
    if damage >= minor:
        return ThresholdHit.MINOR
    return None


def damage_hp_loss(hit: ThresholdHit | None, hp_current: int) -> int:
    """HP actually lost for a hit; never more than the HP remaining."""
    if hit is None:
        return 0
    return min(HP_LOSS_BY_TIER[hit], max(hp_current, 0))


def effective_stress_cap(stress_max: int) -> int:
    return stress_max if stress_max > 0 else DEFAULT_STRESS_CAP


@dataclass
class StressOutcome:
    """Result of applying a stress change."""
    stress_current: int
    hp_current: int
    stress_applied: int
    hp_overflow_damage: int


def apply_stress(stress_current: int, stress_max: int, hp_current: int, amount: int) -> StressOutcome:
    """Apply a stress change with overflow into HP.

    Positive amounts behave as if applied one unit at a time: each unit
    marks stress while there is room below the cap, and once stress is full
    each further unit is one point of overflow damage against HP. HP never
    drops below 0 but every overflowing unit is still counted. Negative
    amounts clear stress but never below 0. Runs in constant time whatever
    the amount.
    """
    cap = effective_stress_cap(stress_max)
    stress = stress_current
    hp = hp_current
    applied = 0
    overflow = 0

    if amount > 0:
        applied = min(amount, max(cap - stress, 0))
        stress += applied
        overflow = amount - applied
        hp = max(hp - overflow, 0)
    elif amount < 0:
        reduction = min(-amount, stress)
        stress -= reduction
        applied = -reduction

    return StressOutcome(
        stress_current=stress,
        hp_current=hp,
        stress_applied=applied,
        hp_overflow_damage=overflow,
    )


def thresholds_ordered(minor: int, major: int, severe: int) -> bool:
    return minor <= major <= severe
