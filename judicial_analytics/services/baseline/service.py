"""Peer-group baselines with a read-through, two-level cache.

A baseline is the population mean and standard deviation of four headline
metrics across the judges of a jurisdiction or court:

    settlement_rate, motion_grant_rate, avg_case_duration_days,
    plaintiff_favorable_rate

Each judge contributes one value per metric, computed over their cases
decided within the lookback window. Judges with fewer than
baseline_min_cases_per_judge qualifying cases are left out. Motion and
duration statistics only use judges that have data for them.

Reads go fast cache -> local cache -> recompute, and a recomputed
baseline is written back to both. Cache failures are logged and never
fail the read. Recomputation races are harmless: the TTL bounds staleness.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol

import structlog

from judicial_analytics.core.config import Settings
from judicial_analytics.core.exceptions import BaselineUnavailableError
from judicial_analytics.models.domain import BaselineScope, CaseRecord
from judicial_analytics.models.report import (
    Baseline,
    BaselineMetrics,
    JudgeHeadlineMetrics,
    MetricStats,
)
from judicial_analytics.services.baseline.cache import (
    BaselineCache,
    InMemoryTTLCache,
    baseline_cache_key,
)
from judicial_analytics.services.patterns.classifiers import is_settled
from judicial_analytics.services.patterns.motions import analyze_motion_patterns
from judicial_analytics.services.patterns.outcomes import analyze_bias_metrics
from judicial_analytics.services.patterns.parties import analyze_party_patterns
from judicial_analytics.utils.dates import case_duration_days, parse_case_date, subtract_years
from judicial_analytics.utils.stats import mean, population_std_dev

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


class PeerCaseSource(Protocol):
    """Supplies decided cases for every judge in a scope, keyed by judge id."""

    async def fetch_peer_cases(
        self,
        scope: BaselineScope,
        scope_id: str,
        since: date,
    ) -> Mapping[str, Sequence[CaseRecord]]: ...


class StaticPeerCaseSource:
    """In-memory peer source, mainly for tests and offline batch runs."""

    def __init__(
        self,
        peers: Mapping[tuple[BaselineScope, str], Mapping[str, Sequence[CaseRecord]]] | None = None,
    ) -> None:
        self._peers = {key: dict(value) for key, value in (peers or {}).items()}

    def add_judge(
        self,
        scope: BaselineScope,
        scope_id: str,
        judge_id: str,
        cases: Sequence[CaseRecord],
    ) -> None:
        self._peers.setdefault((scope, scope_id), {})[judge_id] = cases

    async def fetch_peer_cases(
        self,
        scope: BaselineScope,
        scope_id: str,
        since: date,
    ) -> Mapping[str, Sequence[CaseRecord]]:
        return self._peers.get((scope, scope_id), {})


# ---------------------------------------------------------------------------
# Headline metrics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _JudgeSample:
    metrics: JudgeHeadlineMetrics
    case_count: int
    decided_motions: int
    timed_cases: int
    decided_party_outcomes: int


def _judge_sample(cases: Sequence[CaseRecord]) -> _JudgeSample:
    motions = analyze_motion_patterns(cases)
    parties = analyze_party_patterns(cases)
    durations = [d for c in cases if (d := case_duration_days(c)) is not None]
    settled = sum(1 for c in cases if is_settled(c))

    return _JudgeSample(
        metrics=JudgeHeadlineMetrics(
            settlement_rate=settled / len(cases) if cases else 0.0,
            motion_grant_rate=motions.overall_grant_rate,
            avg_case_duration_days=mean(durations),
            plaintiff_favorable_rate=parties.plaintiff_vs_defendant_rate,
        ),
        case_count=len(cases),
        decided_motions=motions.total_motions_analyzed,
        timed_cases=len(durations),
        decided_party_outcomes=parties.plaintiff_vs_defendant_cases,
    )


def judge_headline_metrics(cases: Sequence[CaseRecord]) -> JudgeHeadlineMetrics:
    """One judge's values for the four baseline metrics."""
    return _judge_sample(cases).metrics


def _stats(values: Sequence[float], sample_size: int) -> MetricStats:
    center = mean(values)
    return MetricStats(
        mean=center,
        std_dev=population_std_dev(values, center),
        sample_size=sample_size,
    )


def _within_window(case: CaseRecord, since: date) -> bool:
    decided = parse_case_date(case.decision_date)
    return decided is not None and decided >= since


def compute_baseline(
    scope: BaselineScope,
    scope_id: str,
    peers_by_judge: Mapping[str, Sequence[CaseRecord]],
    *,
    since: date | None = None,
    min_cases_per_judge: int = 10,
    generated_at: datetime | None = None,
) -> Baseline | None:
    """Population statistics of per-judge headline metrics.

    Only cases decided on or after `since` count. Returns None when no
    judge has enough qualifying cases.
    """
    samples: list[_JudgeSample] = []
    pooled: list[CaseRecord] = []
    for judge_cases in peers_by_judge.values():
        qualifying = [c for c in judge_cases if since is None or _within_window(c, since)]
        if len(qualifying) < min_cases_per_judge:
            continue
        samples.append(_judge_sample(qualifying))
        pooled.extend(qualifying)

    if not samples:
        return None

    with_motions = [s for s in samples if s.decided_motions > 0]
    with_durations = [s for s in samples if s.timed_cases > 0]

    metrics = BaselineMetrics(
        settlement_rate=_stats(
            [s.metrics.settlement_rate for s in samples],
            sum(s.case_count for s in samples),
        ),
        motion_grant_rate=_stats(
            [s.metrics.motion_grant_rate for s in with_motions],
            sum(s.decided_motions for s in with_motions),
        ),
        avg_case_duration_days=_stats(
            [s.metrics.avg_case_duration_days for s in with_durations],
            sum(s.timed_cases for s in with_durations),
        ),
        plaintiff_favorable_rate=_stats(
            [s.metrics.plaintiff_favorable_rate for s in samples],
            sum(s.decided_party_outcomes for s in samples),
        ),
    )

    return Baseline(
        scope=scope,
        scope_id=scope_id,
        metrics=metrics,
        total_cases=len(pooled),
        judge_count=len(samples),
        generated_at=generated_at or datetime.now(UTC),
        bias_metrics=analyze_bias_metrics(pooled) if scope == BaselineScope.COURT else None,
    )


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class BaselineService:
    """Read-through baseline lookup over a fast cache and a local cache."""

    def __init__(
        self,
        settings: Settings,
        peer_source: PeerCaseSource,
        *,
        fast_cache: BaselineCache | None = None,
        local_cache: BaselineCache | None = None,
    ) -> None:
        self._settings = settings
        self._peer_source = peer_source
        self._fast_cache = fast_cache
        self._local_cache = local_cache if local_cache is not None else InMemoryTTLCache()

    async def get_baseline(
        self,
        scope: BaselineScope,
        scope_id: str,
        *,
        reference_date: date | None = None,
        timeout: float | None = None,
    ) -> Baseline | None:
        """Cached baseline for a scope, recomputing on a miss.

        Returns None if no peers qualify, the peer source fails, or the
        recompute exceeds `timeout` (baseline_timeout_seconds by default).
        """
        key = baseline_cache_key(scope, scope_id)

        if self._fast_cache is not None:
            cached = await self._cache_get(self._fast_cache, key, tier="fast")
            if cached is not None:
                logger.debug("baseline_cache_hit", key=key, tier="fast")
                return cached

        cached = await self._cache_get(self._local_cache, key, tier="local")
        if cached is not None:
            logger.debug("baseline_cache_hit", key=key, tier="local")
            return cached

        try:
            baseline = await asyncio.wait_for(
                self._recompute(scope, scope_id, reference_date),
                timeout=timeout if timeout is not None else self._settings.baseline_timeout_seconds,
            )
        except TimeoutError:
            logger.warning("baseline_recompute_timeout", scope=scope, scope_id=scope_id)
            return None
        except BaselineUnavailableError as exc:
            logger.warning(
                "baseline_recompute_failed",
                scope=scope,
                scope_id=scope_id,
                error=exc.message,
                cause=repr(exc.__cause__),
            )
            return None

        if baseline is None:
            logger.info("baseline_unavailable", scope=scope, scope_id=scope_id)
            return None

        ttl = self._settings.baseline_ttl_seconds
        await self._cache_set(self._local_cache, key, baseline, ttl, tier="local")
        if self._fast_cache is not None:
            await self._cache_set(self._fast_cache, key, baseline, ttl, tier="fast")
        return baseline

    async def get_jurisdiction_baseline(
        self,
        jurisdiction: str,
        *,
        reference_date: date | None = None,
    ) -> Baseline | None:
        return await self.get_baseline(
            BaselineScope.JURISDICTION, jurisdiction, reference_date=reference_date
        )

    async def get_court_baseline(
        self,
        court_id: str,
        *,
        reference_date: date | None = None,
    ) -> Baseline | None:
        return await self.get_baseline(BaselineScope.COURT, court_id, reference_date=reference_date)

    async def _recompute(
        self,
        scope: BaselineScope,
        scope_id: str,
        reference_date: date | None,
    ) -> Baseline | None:
        reference = reference_date or date.today()
        since = subtract_years(reference, self._settings.baseline_lookback_years)
        try:
            peers = await self._peer_source.fetch_peer_cases(scope, scope_id, since)
        except Exception as exc:
            raise BaselineUnavailableError(
                f"Peer case fetch failed for {scope} {scope_id}",
                details={"scope": str(scope), "scope_id": scope_id},
            ) from exc
        baseline = compute_baseline(
            scope,
            scope_id,
            peers,
            since=since,
            min_cases_per_judge=self._settings.baseline_min_cases_per_judge,
        )
        if baseline is not None:
            logger.info(
                "baseline_computed",
                scope=scope,
                scope_id=scope_id,
                judge_count=baseline.judge_count,
                total_cases=baseline.total_cases,
            )
        return baseline

    async def _cache_get(self, cache: BaselineCache, key: str, *, tier: str) -> Baseline | None:
        try:
            return await asyncio.wait_for(
                cache.get(key), timeout=self._settings.redis_timeout_seconds
            )
        except Exception as exc:
            logger.warning(
                "baseline_cache_read_failed", key=key, tier=tier, error=str(exc), exc_info=True
            )
            return None

    async def _cache_set(
        self,
        cache: BaselineCache,
        key: str,
        value: Baseline,
        ttl: int,
        *,
        tier: str,
    ) -> None:
        try:
            await asyncio.wait_for(
                cache.set(key, value, ttl), timeout=self._settings.redis_timeout_seconds
            )
        except Exception as exc:
            logger.warning(
                "baseline_cache_write_failed", key=key, tier=tier, error=str(exc), exc_info=True
            )
