#!/usr/bin/env python3
"""
Dashboard Runtime

ARCHITECTURAL OVERVIEW:
=======================
Responsibility: Own the single asyncio event loop that every state mutation
runs on, plus the objects bound to it (store, map view, render loop and the
playback timer).

Concurrency model:
- The loop runs in one background thread (start() / stop(), or use the
  runtime as a context manager)
- Flask request threads call runtime.call(fn, ...): fn runs on the loop
  thread via asyncio.run_coroutine_threadsafe and the request waits for its
  result, so commands are applied one at a time
- After each command, stale regions get a fire-and-forget refresh task;
  its results land in the store's cache (last-write-wins per region)
- The playback timer schedules its ticks with loop.call_later

For Navigation: Use VS Code outline (Ctrl+Shift+O)
"""

import asyncio
import logging
import threading
from typing import Any, Callable, Dict, Optional, Set, TypeVar

from weather_region_viz.config_types import APP_CONFIG, AppConfig
from weather_region_viz.map_view import MapView
from weather_region_viz.state_store import DashboardStore
from weather_region_viz.timeline import PlaybackTimer, Timeline
from weather_region_viz.visualization.render import Frame, RenderLoop
from weather_region_viz.weather_source import SampleFetcher, SyntheticWeatherSource

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DashboardRuntime:
    """Event-loop owner for one dashboard session."""

    def __init__(
        self,
        config: AppConfig = APP_CONFIG,
        fetcher: Optional[SampleFetcher] = None,
        store: Optional[DashboardStore] = None,
    ) -> None:
        self.config = config
        self.loop = asyncio.new_event_loop()
        self._thread: Optional[threading.Thread] = None
        self._tasks: Set[asyncio.Task] = set()
        self._closing = False

        if store is None:
            store = DashboardStore(
                config=config,
                fetcher=fetcher or SyntheticWeatherSource(config.weather_source),
            )
        self.store = store
        self.map_view = MapView(store)
        self.render_loop = RenderLoop()

        pb = config.playback
        self.playback = PlaybackTimer(
            self.loop,
            self._tick,
            base_interval_s=pb.base_interval_s,
            speeds=pb.speeds,
            speed=pb.default_speed,
        )

    # ═══════════════════════════════════════════════════════════════════════
    # 🔄 LIFECYCLE
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "DashboardRuntime":
        if self.running:
            return self
        self._thread = threading.Thread(
            target=self._run_loop, name="dashboard-loop", daemon=True
        )
        self._thread.start()
        logger.info("🚀 Dashboard runtime started")
        return self

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def stop(self) -> None:
        """Cancel playback and pending fetches, then stop and close the loop."""
        if not self.running:
            if not self.loop.is_closed():
                self.loop.close()
            return
        self.call(self._shutdown)
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=self.config.server.command_timeout_s)
        self._thread = None
        self.loop.close()
        logger.info("🛑 Dashboard runtime stopped")

    def _shutdown(self) -> None:
        self._closing = True
        self.playback.stop()
        for task in list(self._tasks):
            task.cancel()

    def __enter__(self) -> "DashboardRuntime":
        return self.start()

    def __exit__(self, *exc_info: Any) -> None:
        self.stop()

    # ═══════════════════════════════════════════════════════════════════════
    # 📨 COMMAND SUBMISSION
    # ═══════════════════════════════════════════════════════════════════════

    def call(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """
        Run fn on the loop thread and wait for its result.

        Exceptions raised by fn propagate to the caller.
        """
        if not self.running:
            raise RuntimeError("Dashboard runtime is not running")

        async def command() -> T:
            try:
                return fn(*args, **kwargs)
            finally:
                self._schedule_refresh()

        future = asyncio.run_coroutine_threadsafe(command(), self.loop)
        return future.result(timeout=self.config.server.command_timeout_s)

    def _schedule_refresh(self) -> None:
        if self._closing or not self.store.samples_stale or self.store.fetcher is None:
            return
        task = self.loop.create_task(self.store.refresh_samples())
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"❌ Sample refresh crashed: {error!r}")
            self.store.notifications.error("Data Error", "Failed to fetch weather data")

    @property
    def pending_fetches(self) -> int:
        return len(self._tasks)

    # ═══════════════════════════════════════════════════════════════════════
    # ⏯️ PLAYBACK (loop thread only)
    # ═══════════════════════════════════════════════════════════════════════

    def timeline(self) -> Timeline:
        return Timeline(self.store.time_range, self.store.current_time)

    def _tick(self) -> bool:
        timeline = self.timeline()
        advanced = timeline.advance()
        self.store.set_current_time(timeline.current_time)
        return advanced

    def play(self) -> bool:
        """Start playback unless the clock already sits at the range end."""
        if not self.timeline().can_play:
            return False
        self.playback.start()
        return True

    def pause(self) -> None:
        self.playback.stop()

    # ═══════════════════════════════════════════════════════════════════════
    # 🖌️ VIEWS (loop thread only)
    # ═══════════════════════════════════════════════════════════════════════

    def frame(self) -> Frame:
        return self.render_loop.update(self.map_view.render_inputs())

    def playback_dict(self) -> Dict[str, Any]:
        timeline = self.timeline()
        return {
            **timeline.to_dict(),
            "isPlaying": self.playback.running,
            "speed": self.playback.speed,
            "speeds": list(self.playback.speeds),
            "canPlay": timeline.can_play,
            "atStart": timeline.at_start,
            "atEnd": timeline.at_end,
        }

    def state_dict(self) -> Dict[str, Any]:
        store = self.store
        resolve = store.color_resolver()
        regions = [
            {**r.to_dict(), "color": resolve(r), "currentValue": resolve.value_for(r)}
            for r in store.regions
        ]
        return {
            "regions": regions,
            "dataSources": [d.to_dict() for d in store.data_sources.values()],
            "selectedDataSourceId": store.selected_data_source_id,
            "playback": self.playback_dict(),
            "map": self.map_view.to_dict(),
            "darkMode": store.dark_mode,
            "isLoading": store.is_loading or bool(self._tasks),
            "cachedRegionIds": sorted(store.samples),
        }
