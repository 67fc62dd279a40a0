"""Rule-based chat replies about the pet's day."""

import random
from datetime import datetime
from typing import List, Optional, Sequence

import structlog

from ..domain.models import Activity, ActivityType
from .insights import filter_today, of_type

logger = structlog.get_logger()

TIPS = (
    "Regular meal times help establish routine and aid digestion.",
    "Interactive toys during walks can make exercise more mentally stimulating.",
    "Keep a consistent medication schedule - setting phone reminders helps!",
    "Watch for changes in eating or activity patterns - they can indicate health issues.",
    "Positive reinforcement during activities strengthens your bond!",
)

WALK_KEYWORDS = ("walk", "exercise")
MEAL_KEYWORDS = ("meal", "food", "eat")
MEDICATION_KEYWORDS = ("medication", "medicine", "med")
TIP_KEYWORDS = ("tip", "advice")

GOOD_WALK_MINUTES = 30


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


def format_amount(value: float) -> str:
    """Render whole numbers without a trailing ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


class ResponseSelector:
    """Picks a canned reply by keyword, first matching rule wins."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    @staticmethod
    def _mentions(message: str, keywords: Sequence[str]) -> bool:
        return any(keyword in message for keyword in keywords)

    def select(
        self,
        message: str,
        activities: Sequence[Activity],
        current_pet: str,
        now: datetime,
    ) -> str:
        """Generate a reply for ``message`` given today's activity log."""
        text = message.lower()
        todays = filter_today(activities, now)
        walks = of_type(todays, ActivityType.WALK)
        meals = of_type(todays, ActivityType.MEAL)
        meds = of_type(todays, ActivityType.MEDICATION)

        pet = current_pet or "your pet"
        pet_title = current_pet or "Your pet"

        if self._mentions(text, WALK_KEYWORDS):
            return self._walk_reply(walks, pet, pet_title)

        if self._mentions(text, MEAL_KEYWORDS):
            return (
                f"{pet_title} has had {len(meals)} meal{_plural(len(meals))} today. "
                "Most adult dogs do well with 2 meals per day, while cats often "
                "prefer 3-4 smaller meals."
            )

        if self._mentions(text, MEDICATION_KEYWORDS):
            return (
                f"I see {len(meds)} medication{_plural(len(meds))} logged today. "
                "It's great that you're keeping track! Always follow your vet's "
                "instructions for dosage and timing."
            )

        if "health" in text or ("how" in text and "doing" in text):
            exercise = "They got some exercise" if walks else "They could use some exercise"
            medication = "took their medication" if meds else "no medications were needed"
            return (
                f"Based on today's activities, {pet} seems to be doing well! "
                f"{exercise}, had {len(meals)} meal{_plural(len(meals))}, and {medication}. "
                "Regular activity tracking helps ensure their wellbeing!"
            )

        if self._mentions(text, TIP_KEYWORDS):
            return self._rng.choice(TIPS)

        if todays:
            recent = todays[-1]
            return (
                f"I see you recently logged a {recent.type.value} for {pet}. "
                "How are they feeling? I'm here to help with any questions about "
                "pet care routines!"
            )

        return (
            f"Hi there! I'm here to help you take the best care of {pet}. "
            "You can ask me about walks, meals, medications, or general pet care "
            "tips. What would you like to know?"
        )

    def _walk_reply(self, walks: List[Activity], pet: str, pet_title: str) -> str:
        if not walks:
            return (
                f"I notice {pet} hasn't had a walk today yet! Dogs typically need "
                "at least 30-60 minutes of exercise daily. Would you like some tips "
                "for making walks more engaging?"
            )
        total = sum(walk.duration for walk in walks)
        verdict = (
            "excellent"
            if total >= GOOD_WALK_MINUTES
            else "a good start, but they might need a bit more"
        )
        logger.debug("walk_reply", walk_count=len(walks), total_minutes=total)
        return f"Great job! {pet_title} has walked for {format_amount(total)} minutes today. That's {verdict}!"
