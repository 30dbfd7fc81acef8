"""Simulated Repair Estimator — placeholder "AI" that draws repair hours at random.

Invariants:
    - Hours are in [1.0, 11.0], rounded to one decimal
    - cost = hours * labor rate, rounded to cents
    - No IO: the caller owns latency simulation and persistence

Design Decisions:
    - Injected random.Random: tests seed it, production uses a fresh one
"""

import random
from dataclasses import dataclass

MIN_HOURS = 1.0
HOUR_SPREAD = 10.0


@dataclass(frozen=True)
class SimulatedEstimate:
    hours: float
    cost: float


class SimulatedRepairEstimator:
    """Stands in for a real repair-time model until one exists."""

    def __init__(self, labor_rate_per_hour: float, rng: random.Random | None = None):
        self.labor_rate_per_hour = labor_rate_per_hour
        self._rng = rng or random.Random()

    def draw_hours(self) -> float:
        return round(self._rng.random() * HOUR_SPREAD + MIN_HOURS, 1)

    def estimate(self) -> SimulatedEstimate:
        hours = self.draw_hours()
        return SimulatedEstimate(hours=hours, cost=self.cost_for(hours))

    def cost_for(self, hours: float) -> float:
        return round(hours * self.labor_rate_per_hour, 2)

    def answer_question(self, question: str) -> dict:
        """Canned natural-language answer for the ask-AI endpoint."""
        hours = self.draw_hours()
        return {
            "estimated_hours": hours,
            "answer": (
                f'Based on your question "{question}", a simulated AI estimates '
                f"the repair would take approximately {hours} hours."
            ),
        }

    def repair_estimate_answer(
        self, estimate: SimulatedEstimate, vin: str | None, damage_count: int,
    ) -> str:
        return (
            f"A simulated AI estimates the repair for VIN {vin} with "
            f"{damage_count} images would take approximately {estimate.hours} hours."
        )

    def analyze_images(self, images: list[str]) -> list[dict]:
        """One canned detection per image reference."""
        return [
            {"image": image, "result": "Detected: Object X with 90% confidence"}
            for image in images
        ]
