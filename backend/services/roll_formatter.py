"""Canonical display strings for dice rolls."""

from models import DiceRollResult


def format_roll(roll: DiceRollResult) -> str:
    """
    Render a roll as "2d20: 5, 15 + 3 = 23 (attack)".

    The modifier clause is left out when the modifier is 0 and the description
    clause when there is no description. Callers must reject rolls with no
    results before getting here.
    """
    text = f"{len(roll.results)}d{roll.die_size}: " + ", ".join(str(r) for r in roll.results)
    if roll.modifier:
        sign = "+" if roll.modifier > 0 else "-"
        text += f" {sign} {abs(roll.modifier)}"
    text += f" = {roll.total}"
    if roll.description:
        text += f" ({roll.description})"
    return text
