"""Facade that wires the history sources to the analytics engines."""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from analytics.club_stats import get_club_performance
from analytics.club_suggestion import ClubSuggestionEngine, get_wind_adjustment
from analytics.heat_map import get_heat_map
from analytics.lie_intelligence import LieIntelligence
from analytics.pressure import PressureClassifier
from analytics.recompute import HoleAggregateRecomputer
from analytics.reference import DEMO_HISTORY
from analytics.shot_decision import ShotDecisionEngine
from analytics.sources import (
    CourseReference,
    FallbackHistorySource,
    HistorySnapshot,
    RoundAggregateStore,
    RoundHistory,
    ShotRepository,
    StaticHistorySource,
    StaticRoundHistory,
)
from analytics.summary import get_shot_summary
from analytics.tendencies import get_tendencies
from config import Settings, get_settings
from database.exceptions import UpstreamUnavailableError
from models import (
    ClubPerformanceStat,
    ClubSuggestion,
    HeatMapPoint,
    LieAnalysis,
    LieContext,
    LiePrediction,
    PerformanceInsight,
    PressureAnalysis,
    PressureContext,
    RoundHole,
    ShotDecision,
    ShotPatternAnalysis,
    SituationContext,
    SuggestionContext,
    TendencyInsight,
    WindAdjustment,
    WindConditions,
)

logger = logging.getLogger(__name__)


class AnalyticsService:
    """
    Entry point for every analytics operation.

    History reads go through a FallbackHistorySource: when the live store
    is unreachable (or has nothing for the user) results are computed over
    the demo dataset and flagged ``degraded`` where the response has room
    for it.
    """

    def __init__(
        self,
        shots: ShotRepository,
        store: RoundAggregateStore,
        courses: Optional[CourseReference] = None,
        round_history: Optional[RoundHistory] = None,
        settings: Optional[Settings] = None,
        fallback: Optional[ShotRepository] = None,
        suggestion_engine: Optional[ClubSuggestionEngine] = None,
        pressure_classifier: Optional[PressureClassifier] = None,
        decision_engine: Optional[ShotDecisionEngine] = None,
        lie_intelligence: Optional[LieIntelligence] = None,
    ):
        self._shots = shots
        self._settings = settings or get_settings()
        self._round_history = round_history or StaticRoundHistory()
        self._history = FallbackHistorySource(shots, fallback or StaticHistorySource(DEMO_HISTORY))
        self._recomputer = HoleAggregateRecomputer(shots, store, courses)
        self._suggestions = suggestion_engine or ClubSuggestionEngine()
        self._pressure = pressure_classifier or PressureClassifier()
        self._decisions = decision_engine or ShotDecisionEngine()
        self._lies = lie_intelligence or LieIntelligence()

    def _since(self) -> datetime:
        return datetime.now(timezone.utc) - timedelta(days=self._settings.history_window_days)

    async def load_history(self, user_id: str, round_limit: Optional[int] = None) -> HistorySnapshot:
        rounds = round_limit or self._settings.history_round_limit
        return await self._history.load(user_id, rounds, self._since())

    # ================================================================
    # Aggregation
    # ================================================================

    async def recompute_hole_aggregate(self, round_id: str, hole_number: int) -> Optional[RoundHole]:
        return await self._recomputer.recompute_hole_aggregate(round_id, hole_number)

    # ================================================================
    # Shot history analytics
    # ================================================================

    async def get_club_performance(
        self, user_id: str, round_limit: Optional[int] = None
    ) -> List[ClubPerformanceStat]:
        snapshot = await self.load_history(user_id, round_limit)
        return get_club_performance(snapshot.shots)

    async def get_tendencies(
        self, user_id: str, round_limit: Optional[int] = None
    ) -> List[TendencyInsight]:
        snapshot = await self.load_history(user_id, round_limit)
        return get_tendencies(snapshot.shots)

    async def get_heat_map(
        self, user_id: str, round_limit: Optional[int] = None
    ) -> List[HeatMapPoint]:
        snapshot = await self.load_history(user_id, round_limit)
        return get_heat_map(snapshot.shots)

    async def get_shot_analysis(
        self, user_id: str, round_limit: Optional[int] = None
    ) -> ShotPatternAnalysis:
        """Heat map, tendencies, club stats and summary from one history read."""
        snapshot = await self.load_history(user_id, round_limit)
        club_stats = get_club_performance(snapshot.shots)
        return ShotPatternAnalysis(
            heat_map=get_heat_map(snapshot.shots),
            tendencies=get_tendencies(snapshot.shots),
            club_stats=club_stats,
            summary=get_shot_summary(snapshot.shots, club_stats),
            degraded=snapshot.degraded,
        )

    # ================================================================
    # Caddie
    # ================================================================

    async def get_club_suggestions(
        self, user_id: str, context: SuggestionContext
    ) -> List[ClubSuggestion]:
        """Ranked clubs; an unreachable store downgrades to the distance table."""
        try:
            history = await self._shots.fetch_historical(
                user_id, self._settings.history_round_limit, self._since()
            )
        except UpstreamUnavailableError as exc:
            logger.warning("club history unavailable for user %s: %s", user_id, exc)
            return self._suggestions.basic_suggestions(context)
        return self._suggestions.suggest(context, history)

    def get_wind_adjustment(self, wind: Optional[WindConditions]) -> WindAdjustment:
        return get_wind_adjustment(wind)

    async def get_pressure_analysis(
        self, user_id: str, context: PressureContext
    ) -> PressureAnalysis:
        try:
            snapshot = await self.load_history(user_id)
        except UpstreamUnavailableError as exc:
            logger.warning(
                "no history source for user %s, basic pressure analysis: %s", user_id, exc
            )
            return self._pressure.basic_analysis()

        try:
            totals = await self._round_history.recent_totals(
                user_id, self._settings.round_history_limit
            )
        except UpstreamUnavailableError as exc:
            logger.warning("round totals unavailable for user %s: %s", user_id, exc)
            totals = []

        analysis = self._pressure.analyze(context, snapshot.shots, totals)
        if snapshot.degraded:
            analysis = analysis.model_copy(update={"degraded": True})
        return analysis

    async def get_shot_decision(
        self, user_id: str, context: SituationContext
    ) -> ShotDecision:
        try:
            snapshot = await self.load_history(user_id)
        except UpstreamUnavailableError as exc:
            logger.warning("no history source for user %s, basic decision: %s", user_id, exc)
            return self._decisions.basic_decision(context)

        decision = self._decisions.decide(context, snapshot.shots)
        if snapshot.degraded:
            decision = decision.model_copy(update={"degraded": True})
        return decision

    async def get_performance_insights(self, user_id: str) -> List[PerformanceInsight]:
        snapshot = await self.load_history(user_id)
        return self._decisions.performance_insights(snapshot.shots)

    async def get_lie_prediction(self, user_id: str, context: LieContext) -> LiePrediction:
        try:
            snapshot = await self.load_history(user_id)
        except UpstreamUnavailableError as exc:
            logger.warning("no history source for user %s, basic lie prediction: %s", user_id, exc)
            return self._lies.basic_prediction(context)

        prediction = self._lies.predict(context, snapshot.shots)
        if snapshot.degraded:
            prediction = prediction.model_copy(update={"degraded": True})
        return prediction

    async def get_lie_analysis(self, user_id: str, lie: Optional[str]) -> LieAnalysis:
        try:
            snapshot = await self.load_history(user_id)
        except UpstreamUnavailableError as exc:
            logger.warning("no history source for user %s, basic lie analysis: %s", user_id, exc)
            return self._lies.basic_analysis(lie)

        analysis = self._lies.analyze(lie, snapshot.shots)
        if snapshot.degraded:
            analysis = analysis.model_copy(update={"degraded": True})
        return analysis
