from datetime import datetime, timezone

import pytest
from unittest.mock import AsyncMock

from analytics.reference import DEMO_HISTORY
from analytics.service import AnalyticsService
from analytics.sources import FallbackHistorySource, StaticHistorySource, StaticRoundHistory
from config import Settings, get_settings, reset_settings_cache
from database.exceptions import UpstreamUnavailableError
from models import LieContext, PressureContext, Shot, SituationContext, SuggestionContext


def _live_shots():
    return [
        Shot(round_id="r1", hole_number=1, shot_number=2, category="approach", club="7 Iron",
             start_distance_to_hole=150, end_distance_to_hole=8, result_zone="Good")
        for _ in range(3)
    ]


@pytest.fixture
def shots():
    repo = AsyncMock()
    repo.fetch_historical.return_value = _live_shots()
    return repo


@pytest.fixture
def service(shots):
    return AnalyticsService(
        shots=shots,
        store=AsyncMock(),
        round_history=StaticRoundHistory([84, 86, 88]),
        settings=Settings(history_round_limit=10, history_window_days=30),
    )


# ================================================================
# FallbackHistorySource
# ================================================================

@pytest.mark.asyncio
async def test_fallback_used_when_live_unreachable(shots):
    shots.fetch_historical.side_effect = UpstreamUnavailableError("down")
    source = FallbackHistorySource(shots, StaticHistorySource(DEMO_HISTORY))

    snapshot = await source.load("u1", 10)

    assert snapshot.degraded is True
    assert len(snapshot.shots) == len(DEMO_HISTORY)


@pytest.mark.asyncio
async def test_fallback_used_when_live_is_empty(shots):
    shots.fetch_historical.return_value = []
    source = FallbackHistorySource(shots, StaticHistorySource(DEMO_HISTORY))

    snapshot = await source.load("u1", 10)
    assert snapshot.degraded is True


@pytest.mark.asyncio
async def test_empty_live_history_can_be_kept(shots):
    shots.fetch_historical.return_value = []
    source = FallbackHistorySource(shots, StaticHistorySource(DEMO_HISTORY), fallback_on_empty=False)

    snapshot = await source.load("u1", 10)
    assert snapshot.degraded is False
    assert snapshot.shots == []


@pytest.mark.asyncio
async def test_live_history_passes_through(shots):
    source = FallbackHistorySource(shots, StaticHistorySource(DEMO_HISTORY))

    snapshot = await source.load("u1", 10)
    assert snapshot.degraded is False
    assert len(snapshot.shots) == 3


@pytest.mark.asyncio
async def test_static_source_applies_cutoff():
    old = Shot(hole_number=1, shot_number=1, category="tee",
               created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
    new = Shot(hole_number=1, shot_number=1, category="tee",
               created_at=datetime(2025, 1, 1, tzinfo=timezone.utc))
    source = StaticHistorySource([old, new])

    shots = await source.fetch_historical("u1", 10, datetime(2024, 6, 1, tzinfo=timezone.utc))
    assert shots == [new]


# ================================================================
# AnalyticsService
# ================================================================

@pytest.mark.asyncio
async def test_history_read_is_bounded(service, shots):
    await service.get_club_performance("u1", 4)

    user_id, round_limit, since = shots.fetch_historical.await_args[0]
    assert user_id == "u1"
    assert round_limit == 4
    assert since.tzinfo is not None
    assert (datetime.now(timezone.utc) - since).days == 30


@pytest.mark.asyncio
async def test_default_round_limit_from_settings(service, shots):
    await service.get_tendencies("u1")
    assert shots.fetch_historical.await_args[0][1] == 10


@pytest.mark.asyncio
async def test_shot_analysis_on_live_history(service):
    analysis = await service.get_shot_analysis("u1")
    assert analysis.degraded is False
    assert analysis.summary.total_shots == 3
    assert len(analysis.heat_map) == 3


@pytest.mark.asyncio
async def test_shot_analysis_degrades_to_demo_history(service, shots):
    shots.fetch_historical.side_effect = UpstreamUnavailableError("down")

    analysis = await service.get_shot_analysis("u1")

    assert analysis.degraded is True
    assert analysis.summary.total_shots == 24
    assert analysis.summary.rounds_analyzed == 1
    assert analysis.club_stats


@pytest.mark.asyncio
async def test_decision_flags_degraded_history(service, shots):
    shots.fetch_historical.side_effect = UpstreamUnavailableError("down")
    ctx = SituationContext(distance_to_pin=160, hole_number=5, current_score=16, shot_number=2)

    decision = await service.get_shot_decision("u1", ctx)
    assert decision.degraded is True


@pytest.mark.asyncio
async def test_pressure_survives_missing_round_totals(shots):
    round_history = AsyncMock()
    round_history.recent_totals.side_effect = UpstreamUnavailableError("down")
    service = AnalyticsService(
        shots=shots, store=AsyncMock(), round_history=round_history, settings=Settings(),
    )
    ctx = PressureContext(category="approach", lie="fairway", distance_to_pin=150,
                          hole_number=18, shot_number=2, round_score=70)

    analysis = await service.get_pressure_analysis("u1", ctx)

    names = [f.factor for f in analysis.current_situation.factors]
    assert names == ["Finishing holes"]
    assert analysis.degraded is False


@pytest.mark.asyncio
async def test_basic_results_when_no_history_source_works(shots):
    shots.fetch_historical.side_effect = UpstreamUnavailableError("down")
    fallback = AsyncMock()
    fallback.fetch_historical.side_effect = UpstreamUnavailableError("also down")
    service = AnalyticsService(
        shots=shots, store=AsyncMock(), fallback=fallback, settings=Settings(),
    )

    pressure = await service.get_pressure_analysis(
        "u1", PressureContext(category="putt", distance_to_pin=4, hole_number=2)
    )
    assert pressure.degraded is True
    assert pressure.confidence_booster == "You got this - trust your ability!"

    decision = await service.get_shot_decision(
        "u1", SituationContext(distance_to_pin=80, hole_number=2)
    )
    assert decision.degraded is True
    assert decision.recommendation == "target_specific"


@pytest.mark.asyncio
async def test_club_suggestions_from_live_history(service):
    ctx = SuggestionContext(distance_to_pin=150, shot_category="approach")
    suggestions = await service.get_club_suggestions("u1", ctx)
    assert suggestions[0].club == "7 Iron"
    assert suggestions[0].source == "history"


@pytest.mark.asyncio
async def test_club_suggestions_fall_back_to_distance_table(service, shots):
    shots.fetch_historical.side_effect = UpstreamUnavailableError("down")
    ctx = SuggestionContext(distance_to_pin=150, shot_category="approach")

    suggestions = await service.get_club_suggestions("u1", ctx)

    assert [s.club for s in suggestions] == ["7 Iron", "8 Iron", "6 Iron"]
    assert all(s.source == "basic" for s in suggestions)


@pytest.mark.asyncio
async def test_insights_use_demo_patterns_for_thin_history(service):
    insights = await service.get_performance_insights("u1")
    assert len(insights) == 4


@pytest.mark.asyncio
async def test_recompute_of_missing_round(shots):
    store = AsyncMock()
    store.get_round.return_value = None
    service = AnalyticsService(shots=shots, store=store, settings=Settings())

    assert await service.recompute_hole_aggregate("r1", 1) is None
    store.upsert_hole.assert_not_awaited()


@pytest.mark.asyncio
async def test_lie_prediction_flags_degraded_history(service, shots):
    shots.fetch_historical.side_effect = UpstreamUnavailableError("down")
    ctx = LieContext(category="tee", club="Driver", result="Good")

    prediction = await service.get_lie_prediction("u1", ctx)

    assert prediction.degraded is True
    assert prediction.most_likely == "fairway"


@pytest.mark.asyncio
async def test_lie_analysis_without_any_history_source(shots):
    shots.fetch_historical.side_effect = UpstreamUnavailableError("down")
    fallback = AsyncMock()
    fallback.fetch_historical.side_effect = UpstreamUnavailableError("also down")
    service = AnalyticsService(
        shots=shots, store=AsyncMock(), fallback=fallback, settings=Settings(),
    )

    analysis = await service.get_lie_analysis("u1", "Greenside Bunker")

    assert analysis.degraded is True
    assert analysis.lie == "greenside_bunker"
    assert analysis.expected_difficulty == 5
    assert analysis.adjustments.strategy == "Play within your abilities"


# ================================================================
# Settings
# ================================================================

def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("HISTORY_ROUND_LIMIT", "5")
    monkeypatch.setenv("HISTORY_ROW_CAP", "not-a-number")
    monkeypatch.setenv("ANALYTICS_LOG_LEVEL", "debug")
    reset_settings_cache()
    try:
        settings = get_settings()
        assert settings.history_round_limit == 5
        assert settings.history_row_cap == 1000
        assert settings.log_level == "debug"
        assert get_settings() is settings
    finally:
        reset_settings_cache()


def test_history_limit_is_capped():
    settings = Settings(history_round_limit=5, history_row_cap=250)
    assert settings.history_limit(2) == 200
    assert settings.history_limit() == 250
    assert Settings().history_limit(3) == 300
