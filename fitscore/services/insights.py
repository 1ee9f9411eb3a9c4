"""Read-only analytics over the stored evaluations.

``aggregate_insights`` takes records already fetched by the caller (ORM rows
or ``EvaluationRecord``) and never touches the database.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

from .scoring import (
    APPROVED_LABELS,
    DIMENSIONS,
    Classification,
    dimension_score_100,
    round_half_up,
)
from ..utils.dates import utcnow

AWAITING_DATA = "Aguardando primeiras avaliações para gerar insights"

AREA_NAMES = {"performance": "Performance", "energy": "Energia", "culture": "Cultura"}

WINDOW_24H = timedelta(hours=24)
WINDOW_7D = timedelta(days=7)


@dataclass
class EvaluationRecord:
    """Plain typed row, used where no ORM session is around (tests, scripts)."""
    candidate_name: str
    candidate_email: str
    performance_experience: int
    performance_deliveries: int
    performance_skills: int
    energy_availability: int
    energy_deadlines: int
    energy_pressure: int
    culture_values: int
    culture_collaboration: int
    culture_innovation: int
    fit_score: int
    fit_classification: str
    created_at: datetime
    id: Optional[int] = None


@dataclass
class InsightSnapshot:
    total_evaluations: int = 0
    average_score: int = 0
    average_score_24h: int = 0
    average_score_7d: int = 0
    approval_rate: int = 0
    area_scores: Dict[str, int] = field(default_factory=lambda: {d: 0 for d in DIMENSIONS})
    classifications: Dict[str, int] = field(default_factory=dict)
    peak_hour: Optional[Dict[str, int]] = None
    count_24h: int = 0
    count_7d: int = 0
    trends: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    alerts: List[str] = field(default_factory=list)
    last_updated: datetime = field(default_factory=utcnow)

    def to_dict(self):
        return {
            "totalEvaluations": self.total_evaluations,
            "averageScore": self.average_score,
            "averageScore24h": self.average_score_24h,
            "averageScore7d": self.average_score_7d,
            "approvalRate": self.approval_rate,
            "areaScores": dict(self.area_scores),
            "classifications": dict(self.classifications),
            "peakHour": dict(self.peak_hour) if self.peak_hour else None,
            "trends": list(self.trends),
            "recommendations": list(self.recommendations),
            "alerts": list(self.alerts),
            "lastUpdated": self.last_updated.isoformat(),
        }


def average_score(records: Sequence) -> int:
    if not records:
        return 0
    return round_half_up(sum(r.fit_score for r in records) / len(records))


def within(records: Sequence, now: datetime, window: timedelta) -> list:
    return [r for r in records if now - r.created_at < window]


def classification_distribution(records: Sequence) -> Dict[str, int]:
    dist: Dict[str, int] = {}
    for r in records:
        dist[r.fit_classification] = dist.get(r.fit_classification, 0) + 1
    return dist


def classification_counts(records: Sequence) -> Dict[str, int]:
    """Dashboard stat cards: every label present, zeros included."""
    counts = {label: 0 for label in Classification.labels()}
    for label, n in classification_distribution(records).items():
        if label in counts:
            counts[label] = n
    counts["total"] = len(records)
    return counts


def select_approved(records: Sequence, now: datetime, window_hours: int = 12, min_score: int = 80) -> list:
    """High scorers of the last ``window_hours``, best first."""
    since = now - timedelta(hours=window_hours)
    picked = [r for r in records if r.fit_score >= min_score and r.created_at >= since]
    return sorted(picked, key=lambda r: r.fit_score, reverse=True)


def _local_hour(dt: datetime) -> int:
    # created_at is stored as naive UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone().hour


def peak_hour(records: Sequence) -> Optional[Dict[str, int]]:
    buckets: Dict[int, int] = {}
    for r in records:
        h = _local_hour(r.created_at)
        buckets[h] = buckets.get(h, 0) + 1
    if not buckets:
        return None
    hour = max(buckets, key=buckets.get)
    return {"hour": hour, "count": buckets[hour]}


def area_averages(records: Sequence) -> Dict[str, int]:
    out = {}
    for dim, fields in DIMENSIONS.items():
        per_record = [dimension_score_100([getattr(r, f) for f in fields]) for r in records]
        out[dim] = round_half_up(sum(per_record) / len(per_record)) if per_record else 0
    return out


def _strongest(areas: Dict[str, int]) -> str:
    p, e, c = areas["performance"], areas["energy"], areas["culture"]
    if p >= e and p >= c:
        return "performance"
    return "energy" if e >= c else "culture"


def _weakest(areas: Dict[str, int]) -> str:
    p, e, c = areas["performance"], areas["energy"], areas["culture"]
    if p <= e and p <= c:
        return "performance"
    return "energy" if e <= c else "culture"


def aggregate_insights(records: Sequence, now: Optional[datetime] = None) -> InsightSnapshot:
    """Summarise ``records`` into an ``InsightSnapshot``.

    ``now`` is naive UTC, like ``created_at``; it defaults to the current
    instant.
    """
    now = now or utcnow()
    records = list(records)
    if not records:
        return InsightSnapshot(recommendations=[AWAITING_DATA], last_updated=now)

    total = len(records)
    last24h = within(records, now, WINDOW_24H)
    last7d = within(records, now, WINDOW_7D)

    avg = average_score(records)
    avg24h = average_score(last24h)
    avg7d = average_score(last7d)
    areas = area_averages(records)
    dist = classification_distribution(records)

    approved = sum(dist.get(label, 0) for label in APPROVED_LABELS)
    approval_rate = approved * 100 / total

    trends: List[str] = []
    recommendations: List[str] = []
    alerts: List[str] = []

    if avg24h > avg:
        trends.append(f"📈 Melhoria na qualidade: Score médio subiu {avg24h - avg} pontos nas últimas 24h")
    elif avg24h < avg - 5:
        trends.append(f"📉 Queda na qualidade: Score médio caiu {avg - avg24h} pontos nas últimas 24h")
        alerts.append("Investigar possível problema na atração de candidatos qualificados")

    if len(last24h) > 5:
        trends.append(f"🚀 Alto volume: {len(last24h)} avaliações nas últimas 24h")

    strongest = _strongest(areas)
    weakest = _weakest(areas)
    trends.append(f"💪 Área mais forte: {AREA_NAMES[strongest]} ({areas[strongest]}/100)")
    trends.append(f"🎯 Área para desenvolvimento: {AREA_NAMES[weakest]} ({areas[weakest]}/100)")

    if approval_rate > 70:
        recommendations.append("Excelente taxa de aprovação! Considere aumentar os critérios para maior seletividade")
    elif approval_rate < 30:
        recommendations.append("Taxa de aprovação baixa. Revisar critérios ou melhorar atração de candidatos")
        alerts.append("Taxa de aprovação abaixo de 30% - ação necessária")

    if areas["culture"] < 60:
        recommendations.append("Focar em comunicação dos valores da empresa durante atração de candidatos")

    if areas["performance"] > 80 and areas["energy"] < 60:
        recommendations.append("Candidatos tecnicamente qualificados mas com baixa energia - revisar processo de seleção")

    peak = peak_hour(records)
    if peak:
        trends.append(f"⏰ Horário de pico: {peak['hour']}h com {peak['count']} avaliações")

    return InsightSnapshot(
        total_evaluations=total,
        average_score=avg,
        average_score_24h=avg24h,
        average_score_7d=avg7d,
        approval_rate=round_half_up(approval_rate),
        area_scores=areas,
        classifications=dist,
        peak_hour=peak,
        count_24h=len(last24h),
        count_7d=len(last7d),
        trends=trends,
        recommendations=recommendations,
        alerts=alerts,
        last_updated=now,
    )
