"""FitScore computation and classification.

Ten Likert answers (1-5) are grouped into three dimensions. Each dimension
mean is scaled by 10, the three scaled values are averaged and rounded to
give ``fit_score``; the classification is a step function of that score.

Everything here is pure: no database, no clock, no app context.
"""
import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Iterable, Tuple

MIN_ANSWER = 1
MAX_ANSWER = 5

DIMENSIONS: Dict[str, Tuple[str, str, str]] = {
    "performance": ("performance_experience", "performance_deliveries", "performance_skills"),
    "energy": ("energy_availability", "energy_deadlines", "energy_pressure"),
    "culture": ("culture_values", "culture_collaboration", "culture_innovation"),
}

ANSWER_FIELDS = tuple(f for fields in DIMENSIONS.values() for f in fields)


class InvalidInput(ValueError):
    """An answer is missing or outside the 1-5 range."""


class Classification(str, Enum):
    FIT_ALTISSIMO = "Fit Altíssimo"
    FIT_APROVADO = "Fit Aprovado"
    FIT_QUESTIONAVEL = "Fit Questionável"
    FORA_DO_PERFIL = "Fora do Perfil"

    @classmethod
    def labels(cls):
        return [c.value for c in cls]


APPROVED_LABELS = (Classification.FIT_ALTISSIMO.value, Classification.FIT_APROVADO.value)


def round_half_up(value: float) -> int:
    # matches Math.round, which produced the scores already stored
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Answers:
    performance_experience: int
    performance_deliveries: int
    performance_skills: int
    energy_availability: int
    energy_deadlines: int
    energy_pressure: int
    culture_values: int
    culture_collaboration: int
    culture_innovation: int

    def __post_init__(self):
        validate_answers(asdict(self))

    @classmethod
    def from_mapping(cls, data) -> "Answers":
        """Build from a dict or any object exposing the answer attributes."""
        if isinstance(data, dict):
            missing = [f for f in ANSWER_FIELDS if data.get(f) is None]
            if missing:
                raise InvalidInput(f"missing answers: {', '.join(missing)}")
            return cls(**{f: data[f] for f in ANSWER_FIELDS})
        return cls(**{f: getattr(data, f) for f in ANSWER_FIELDS})

    def dimension_values(self, dimension: str) -> Tuple[int, int, int]:
        return tuple(getattr(self, f) for f in DIMENSIONS[dimension])

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class FitResult:
    score: int
    classification: Classification

    def to_dict(self):
        return {"score": self.score, "classification": self.classification.value}


def validate_answers(values: Dict[str, object]) -> None:
    for field in ANSWER_FIELDS:
        v = values.get(field)
        # bool is an int subclass; True must not pass as 1
        if isinstance(v, bool) or not isinstance(v, int):
            raise InvalidInput(f"{field} must be an integer, got {v!r}")
        if v < MIN_ANSWER or v > MAX_ANSWER:
            raise InvalidInput(f"{field} must be between {MIN_ANSWER} and {MAX_ANSWER}, got {v}")


def _mean(values: Iterable[int]) -> float:
    values = list(values)
    return sum(values) / len(values)


def classify(score: int) -> Classification:
    if score >= 80:
        return Classification.FIT_ALTISSIMO
    if score >= 60:
        return Classification.FIT_APROVADO
    if score >= 40:
        return Classification.FIT_QUESTIONAVEL
    return Classification.FORA_DO_PERFIL


def compute_fit_score(answers: Answers) -> FitResult:
    """Return the persisted score and its classification.

    The per-dimension value is ``mean * 10``; with answers in 1-5 the score
    therefore lies in 10-50.
    """
    scaled = [sum(answers.dimension_values(d)) * 10 / 3 for d in DIMENSIONS]
    score = round_half_up(sum(scaled) / 3)
    return FitResult(score=score, classification=classify(score))


def dimension_score_100(values: Iterable[int]) -> int:
    """Per-dimension score on the analytics scale (``mean * 20``)."""
    return round_half_up(_mean(values) * 20)


def display_scores(answers: Answers) -> Dict[str, int]:
    """Per-dimension 2-10 scores shown in candidate emails only."""
    return {d: round_half_up(_mean(answers.dimension_values(d)) * 2) for d in DIMENSIONS}
