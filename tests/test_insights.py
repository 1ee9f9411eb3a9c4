from datetime import datetime, timedelta, timezone

from fitscore.services.insights import (
    AWAITING_DATA,
    WINDOW_24H,
    WINDOW_7D,
    EvaluationRecord,
    aggregate_insights,
    average_score,
    classification_counts,
    classification_distribution,
    peak_hour,
    select_approved,
    within,
)
from fitscore.services.scoring import classify
from fitscore.utils.dates import utcnow

NOW = datetime(2025, 9, 1, 15, 0, 0)


def rec(score, age=timedelta(minutes=5), performance=3, energy=3, culture=3, label=None):
    return EvaluationRecord(
        candidate_name="Candidate",
        candidate_email="candidate@example.com",
        performance_experience=performance,
        performance_deliveries=performance,
        performance_skills=performance,
        energy_availability=energy,
        energy_deadlines=energy,
        energy_pressure=energy,
        culture_values=culture,
        culture_collaboration=culture,
        culture_innovation=culture,
        fit_score=score,
        fit_classification=label or classify(score).value,
        created_at=NOW - age,
    )


def test_empty_input_awaits_data():
    snap = aggregate_insights([], now=NOW)
    assert snap.total_evaluations == 0
    assert snap.average_score == 0
    assert snap.approval_rate == 0
    assert snap.peak_hour is None
    assert snap.classifications == {}
    assert classification_distribution([]) == {}
    assert snap.trends == []
    assert snap.alerts == []
    assert snap.recommendations == [AWAITING_DATA]


def test_basic_averages_and_approval():
    snap = aggregate_insights([rec(90), rec(70), rec(50)], now=NOW)
    assert snap.total_evaluations == 3
    assert snap.average_score == 70
    assert snap.average_score_24h == 70
    assert snap.average_score_7d == 70
    assert snap.approval_rate == 67
    assert snap.classifications == {"Fit Altíssimo": 1, "Fit Aprovado": 1, "Fit Questionável": 1}
    assert snap.area_scores == {"performance": 60, "energy": 60, "culture": 60}
    # equal 24h and overall averages: no quality trend
    assert not any("qualidade" in t for t in snap.trends)


def test_approval_rate_of_exactly_seventy_triggers_nothing():
    records = [rec(85)] * 7 + [rec(30)] * 3
    snap = aggregate_insights(records, now=NOW)
    assert snap.approval_rate == 70
    assert not any("taxa de aprovação" in r.lower() for r in snap.recommendations)
    assert snap.alerts == []


def test_high_approval_recommends_stricter_criteria():
    snap = aggregate_insights([rec(85)] * 8 + [rec(30)] * 2, now=NOW)
    assert snap.approval_rate == 80
    assert any(r.startswith("Excelente taxa de aprovação") for r in snap.recommendations)


def test_low_approval_recommends_and_alerts():
    snap = aggregate_insights([rec(65)] * 2 + [rec(20)] * 8, now=NOW)
    assert snap.approval_rate == 20
    assert any(r.startswith("Taxa de aprovação baixa") for r in snap.recommendations)
    assert "Taxa de aprovação abaixo de 30% - ação necessária" in snap.alerts


def test_windows_are_strict_and_separate():
    records = [
        rec(60, age=timedelta(hours=1)),
        rec(40, age=timedelta(hours=24)),
        rec(20, age=timedelta(days=3)),
        rec(10, age=timedelta(days=8)),
    ]
    assert len(within(records, NOW, timedelta(hours=24))) == 1
    snap = aggregate_insights(records, now=NOW)
    assert snap.count_24h == 1
    assert snap.count_7d == 3
    assert snap.average_score_24h == 60
    assert snap.average_score_7d == 40
    assert snap.average_score == 33


def test_quality_drop_adds_trend_and_alert():
    records = [rec(90, age=timedelta(days=2)), rec(90, age=timedelta(days=2)), rec(50)]
    snap = aggregate_insights(records, now=NOW)
    assert snap.average_score == 77
    assert "📉 Queda na qualidade: Score médio caiu 27 pontos nas últimas 24h" in snap.trends
    assert "Investigar possível problema na atração de candidatos qualificados" in snap.alerts


def test_quality_improvement_trend():
    snap = aggregate_insights([rec(50, age=timedelta(days=2)), rec(90)], now=NOW)
    assert "📈 Melhoria na qualidade: Score médio subiu 20 pontos nas últimas 24h" in snap.trends


def test_small_dip_is_not_reported():
    # 24h average 4 points below overall stays silent
    snap = aggregate_insights([rec(70, age=timedelta(days=2)), rec(62)], now=NOW)
    assert snap.average_score == 66
    assert not any("qualidade" in t for t in snap.trends)
    assert snap.alerts == []


def test_high_volume_trend():
    snap = aggregate_insights([rec(60, age=timedelta(hours=i)) for i in range(6)], now=NOW)
    assert "🚀 Alto volume: 6 avaliações nas últimas 24h" in snap.trends


def test_strongest_and_weakest_area():
    snap = aggregate_insights([rec(60, performance=5, energy=4, culture=2)], now=NOW)
    assert snap.area_scores == {"performance": 100, "energy": 80, "culture": 40}
    assert "💪 Área mais forte: Performance (100/100)" in snap.trends
    assert "🎯 Área para desenvolvimento: Cultura (40/100)" in snap.trends
    assert "Focar em comunicação dos valores da empresa durante atração de candidatos" in snap.recommendations


def test_skilled_but_low_energy_recommendation():
    snap = aggregate_insights([rec(60, performance=5, energy=2, culture=4)], now=NOW)
    assert any(r.startswith("Candidatos tecnicamente qualificados") for r in snap.recommendations)


def test_peak_hour_counts_local_hour():
    records = [rec(60, age=timedelta(minutes=m)) for m in (1, 2, 3)]
    expected_hour = (NOW - timedelta(minutes=1)).replace(tzinfo=timezone.utc).astimezone().hour
    assert peak_hour(records) == {"hour": expected_hour, "count": 3}
    snap = aggregate_insights(records, now=NOW)
    assert f"⏰ Horário de pico: {expected_hour}h com 3 avaliações" in snap.trends


def test_snapshot_to_dict_keys():
    d = aggregate_insights([rec(70)], now=NOW).to_dict()
    assert set(d) == {
        "totalEvaluations", "averageScore", "averageScore24h", "averageScore7d", "approvalRate",
        "areaScores", "classifications", "peakHour", "trends", "recommendations", "alerts", "lastUpdated",
    }
    assert d["lastUpdated"] == NOW.isoformat()


def test_classification_counts_include_zero_labels():
    counts = classification_counts([rec(90), rec(95)])
    assert counts == {
        "Fit Altíssimo": 2, "Fit Aprovado": 0, "Fit Questionável": 0, "Fora do Perfil": 0, "total": 2,
    }


def test_select_approved_filters_window_and_sorts():
    records = [
        rec(82, age=timedelta(hours=1)),
        rec(95, age=timedelta(hours=2)),
        rec(79, age=timedelta(hours=1)),
        rec(99, age=timedelta(hours=13)),
    ]
    picked = select_approved(records, NOW, window_hours=12, min_score=80)
    assert [r.fit_score for r in picked] == [95, 82]


def test_average_score_rounds_half_up():
    assert average_score([rec(70), rec(71)]) == 71
    assert average_score([]) == 0


def test_record_created_now_is_inside_both_windows():
    records = [rec(60, age=timedelta(0))]
    assert len(within(records, NOW, WINDOW_24H)) == 1
    assert len(within(records, NOW, WINDOW_7D)) == 1
    snap = aggregate_insights(records, now=NOW)
    assert snap.count_24h == 1
    assert snap.average_score_24h == 60


def test_utcnow_is_naive_utc():
    before = datetime.now(timezone.utc).replace(tzinfo=None)
    now = utcnow()
    assert now.tzinfo is None
    assert timedelta(0) <= now - before < timedelta(seconds=5)
