"""Nutrition domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MacroProfile:
    """Macronutrient profile for a portion or a day."""

    calories: float
    protein: float
    carbohydrates: float
    fat: float

    def scaled(self, factor: float) -> "MacroProfile":
        return MacroProfile(
            calories=self.calories * factor,
            protein=self.protein * factor,
            carbohydrates=self.carbohydrates * factor,
            fat=self.fat * factor,
        )

    def __add__(self, other: "MacroProfile") -> "MacroProfile":
        return MacroProfile(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbohydrates=self.carbohydrates + other.carbohydrates,
            fat=self.fat + other.fat,
        )


ZERO_MACROS = MacroProfile(0.0, 0.0, 0.0, 0.0)

# Fixed daily targets shown to the coach until per-user targets exist.
DAILY_TARGETS = MacroProfile(calories=2000, protein=150, carbohydrates=200, fat=65)
