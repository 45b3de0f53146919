"""
Plan loading with a cache-first strategy.

    1. resolve the view range
    2. nothing to ask for (no album, no search) -> empty result
    3. fresh cached plan for the same view/date/identity -> return it
    4. day view: rows of the containing week cached by a previous request
       -> build the day from them, no request
    5. otherwise fetch rows and session periods in parallel, build, save

If the upstream fails we fall back to whatever is cached for the key, even
when stale; only when there is nothing at all the error is raised.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Callable, List, Optional

from zutplan.cache import (
    CacheCategory,
    JsonFileStore,
    ResultCache,
    plan_cache_key,
    week_rows_cache_key,
)
from zutplan.client import PlanClient, PlanIdentity, build_plan_query
from zutplan.config import Settings
from zutplan.engine import build_schedule, empty_schedule
from zutplan.exceptions import UpstreamError
from zutplan.model import ScheduleResult, SessionPeriod, ViewMode, ViewRange
from zutplan.periods import parse_session_periods
from zutplan.ranges import resolve_view_range

log = logging.getLogger(__name__)

PERIODS_CACHE_KEY = "session_periods"


def build_cache(settings: Settings) -> ResultCache:
    """
    On-disk cache with the TTLs from the settings.
    """
    plan_ttl = settings.plan_ttl_minutes * 60
    return ResultCache(
        JsonFileStore(settings.cache_dir),
        ttl={
            CacheCategory.PLAN: plan_ttl,
            CacheCategory.PLAN_ROWS: plan_ttl,
            CacheCategory.PERIODS: settings.periods_ttl_hours * 3600,
        },
    )


@dataclass(frozen=True)
class PlanRequest:
    view_mode: ViewMode | str
    current_date: Any = None
    album: str = ""
    search_category: str = ""
    query: str = ""

    @property
    def identity(self) -> PlanIdentity:
        return PlanIdentity(album=self.album or "", search_category=self.search_category or "", query=self.query or "")


class PlanService:
    def __init__(
        self,
        client: PlanClient,
        cache: ResultCache,
        settings: Settings,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.settings = settings
        self.today = today or settings.today

    def _decode_plan(self, payload: Any) -> Optional[ScheduleResult]:
        if payload is None:
            return None
        try:
            return ScheduleResult.from_dict(payload)
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            log.warning("Ignoring unreadable cached plan: %s", e)
            return None

    def _cached_periods(self) -> Optional[List[SessionPeriod]]:
        payload = self.cache.load_fresh(PERIODS_CACHE_KEY, CacheCategory.PERIODS)
        return None if payload is None else parse_session_periods(payload)

    def _known_periods(self) -> List[SessionPeriod]:
        return parse_session_periods(self.cache.load_force(PERIODS_CACHE_KEY))

    def _fetch_periods(self) -> List[SessionPeriod]:
        periods = self.client.fetch_session_periods()
        if periods:
            self.cache.save(PERIODS_CACHE_KEY, [asdict(p) for p in periods])
            return periods
        # keep showing the last known calendar if the page is down
        return self._known_periods()

    def _fetch(self, identity: PlanIdentity, view_range: ViewRange) -> tuple[List[dict], List[SessionPeriod]]:
        """
        Fetch plan rows and session periods concurrently and wait for both.
        """
        params = build_plan_query(identity, view_range.fetch_start, view_range.fetch_end, self.settings.tz)
        periods = self._cached_periods()

        with ThreadPoolExecutor(max_workers=2) as pool:
            rows_future = pool.submit(self.client.fetch_plan_rows, params)
            periods_future = pool.submit(self._fetch_periods) if periods is None else None
            rows = rows_future.result()
            if periods_future is not None:
                periods = periods_future.result()

        return rows, periods or []

    def _build(
        self, request: PlanRequest, identity: PlanIdentity, rows: List[dict], periods: List[SessionPeriod], today: date
    ) -> ScheduleResult:
        return build_schedule(
            request.view_mode,
            request.current_date,
            rows,
            tz=self.settings.tz,
            today=today,
            session_periods=periods,
            identity=identity.key,
            album=identity.album.strip(),
            day_fetches_week=self.settings.day_fetches_week,
        )

    def load(self, request: PlanRequest, force_refresh: bool = False) -> ScheduleResult:
        today = self.today()
        mode = ViewMode.coerce(request.view_mode)
        identity = request.identity
        view_range = resolve_view_range(
            mode, request.current_date, today=today, day_fetches_week=self.settings.day_fetches_week
        )

        if identity.is_empty:
            log.info("No album or search given, returning an empty plan")
            return empty_schedule(mode, view_range.current, today, self.settings.day_fetches_week)

        key = plan_cache_key(mode.value, view_range.current.isoformat(), identity.key)
        rows_key = week_rows_cache_key(view_range.fetch_start.isoformat(), identity.key)
        widened = mode is ViewMode.DAY and view_range.fetch_start != view_range.fetch_end

        if not force_refresh:
            cached = self._decode_plan(self.cache.load_fresh(key, CacheCategory.PLAN))
            if cached is not None:
                log.info("Using cached plan %s", key)
                return cached

            if widened:
                week_rows = self.cache.load_fresh(rows_key, CacheCategory.PLAN_ROWS)
                if isinstance(week_rows, list):
                    log.info("Building day view from cached week rows %s", rows_key)
                    result = self._build(request, identity, week_rows, self._known_periods(), today)
                    self.cache.save(key, result.to_dict())
                    return result

        try:
            rows, periods = self._fetch(identity, view_range)
        except UpstreamError:
            stale = self._decode_plan(self.cache.load_force(key))
            if stale is not None:
                log.warning("Upstream failed, serving cached plan %s", key)
                return stale
            raise

        # a week view fetches the same window a widened day view reads back
        if widened or mode is ViewMode.WEEK:
            self.cache.save(rows_key, rows)

        result = self._build(request, identity, rows, periods, today)
        self.cache.save(key, result.to_dict())
        return result
