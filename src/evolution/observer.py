"""
Progress observers for evolution runs.

The engine reports generation-boundary progress to a ``ProgressObserver``.
Notifications are queued on a dedicated single-thread dispatcher so a slow
observer never holds up the evolution loop.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional, TYPE_CHECKING
import logging

import logfire

if TYPE_CHECKING:
    from src.evolution.core.population import Individual


logger = logging.getLogger("cover.observer")


class ProgressObserver:
    """
    Receiver of run progress. Every hook is a no-op by default; subclasses
    override what they display.
    """

    def on_seeding_started(self) -> None:
        pass

    def on_seeding_finished(self) -> None:
        pass

    def on_generation_advance(self, index: int) -> None:
        pass

    def on_fitness_update(self, avg_fitness: float, best_fitness: float, generation: int) -> None:
        pass

    def on_cover_update(self, total_nodes: int, selected_nodes: int) -> None:
        pass

    def on_edge_coverage_update(self, total_edges: int, uncovered_edges: int) -> None:
        pass

    def on_best_individual(self, individual: "Individual") -> None:
        pass

    def on_run_finished(self) -> None:
        pass


class LoggingObserver(ProgressObserver):
    """Observer that writes progress to the standard logger and logfire."""

    def __init__(self, logger_name: str = "cover.progress"):
        self.logger = logging.getLogger(logger_name)

    def on_seeding_started(self) -> None:
        self.logger.info("Generating first population")

    def on_seeding_finished(self) -> None:
        self.logger.info("First population ready")

    def on_fitness_update(self, avg_fitness: float, best_fitness: float, generation: int) -> None:
        logfire.debug(
            "Fitness at generation {generation}",
            generation=generation,
            avg_fitness=avg_fitness,
            best_fitness=best_fitness
        )

    def on_cover_update(self, total_nodes: int, selected_nodes: int) -> None:
        self.logger.debug("Cover: %d/%d nodes selected", selected_nodes, total_nodes)

    def on_edge_coverage_update(self, total_edges: int, uncovered_edges: int) -> None:
        if uncovered_edges:
            self.logger.warning("%d of %d edges uncovered", uncovered_edges, total_edges)

    def on_run_finished(self) -> None:
        self.logger.info("Evolution stopped")


class ObserverDispatcher:
    """
    Fire-and-forget delivery of observer notifications.

    Calls run in submission order on one background thread. Exceptions
    raised by the observer are logged and dropped.
    """

    def __init__(self, observer: Optional[ProgressObserver]):
        self.observer = observer or ProgressObserver()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="cover-observer")

    def notify(self, hook: str, *args: Any) -> None:
        """Queue ``observer.<hook>(*args)``."""
        method: Callable[..., None] = getattr(self.observer, hook)
        future = self._executor.submit(method, *args)
        future.add_done_callback(self._report_failure)

    @staticmethod
    def _report_failure(future: Future) -> None:
        error = future.exception()
        if error is not None:
            logger.error("Progress observer failed: %s", error, exc_info=error)

    def close(self, wait: bool = True) -> None:
        """Stop accepting notifications and, by default, drain the queue."""
        self._executor.shutdown(wait=wait)
