"""
Dice rolls drawn from an engine-owned random generator.
"""

import random
from typing import Tuple

DiceRoll = Tuple[int, int]


def roll_dice(rng: random.Random) -> DiceRoll:
    """Roll two independent six-sided dice."""
    return rng.randint(1, 6), rng.randint(1, 6)


def is_doubles(roll: DiceRoll) -> bool:
    return roll[0] == roll[1]


def dice_total(roll: DiceRoll) -> int:
    return roll[0] + roll[1]
