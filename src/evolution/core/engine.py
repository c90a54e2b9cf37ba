"""
Genetic Algorithm Engine for the Vertex Cover Search.

This module implements the engine that orchestrates a run: annealing-seeded
initialization, per-generation reproduction with elitism and deterministic
crowding, catastrophe-driven diversity injection, cooperative cancellation
and the final report.
"""

import asyncio
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Dict, Any
import logging

import logfire
import numpy as np

from src.core.exceptions import GraphUnavailableError
from src.evolution.core.config import CoverConfig
from src.evolution.core.population import Population, Individual
from src.evolution.fitness.base import FitnessFunction
from src.evolution.fitness.cover import CoverFitness
from src.evolution.observer import ObserverDispatcher, ProgressObserver
from src.graph.state_space import StateSpace


class RunState(Enum):
    """Lifecycle of an evolution run."""
    SEEDING = "seeding"
    RUNNING = "running"
    COMPLETED = "completed"
    INTERRUPTED = "interrupted"


@dataclass
class RunResult:
    """Outcome of a finished or interrupted run."""

    state: RunState
    generations_completed: int
    best_individual_ever: Individual
    final_best_individual: Individual
    elapsed_millis: float
    initial_average_fitness: float
    initial_best_fitness: float
    final_population_stats: Dict[str, Any] = field(default_factory=dict)
    avg_fitness_pct_of_initial: Optional[float] = None
    best_fitness_pct_of_initial: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "generations_completed": self.generations_completed,
            "elapsed_millis": self.elapsed_millis,
            "initial_average_fitness": self.initial_average_fitness,
            "initial_best_fitness": self.initial_best_fitness,
            "avg_fitness_pct_of_initial": self.avg_fitness_pct_of_initial,
            "best_fitness_pct_of_initial": self.best_fitness_pct_of_initial,
            "final_population_stats": self.final_population_stats,
            "best_individual_ever": self.best_individual_ever.to_dict(),
            "final_best_individual": self.final_best_individual.to_dict(),
        }


def _pct_of(final: float, initial: float) -> Optional[float]:
    if initial == 0:
        return None
    return final / initial * 100


class CoverEvolutionEngine:
    """
    Main engine for running the evolutionary vertex cover search.

    The whole run executes sequentially on the calling thread; use
    ``start`` to run it on a worker thread with a cancellable handle.
    """

    def __init__(
        self,
        config: CoverConfig,
        graph: StateSpace,
        observer: Optional[ProgressObserver] = None,
        fitness_function: Optional[FitnessFunction] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the engine and validate its inputs.

        Args:
            config: Run configuration
            graph: State space to search a cover of
            observer: Optional progress observer
            fitness_function: Optional fitness function (defaults to CoverFitness)
            logger: Optional logger instance

        Raises:
            ConfigurationError: If the configuration is invalid
            GraphUnavailableError: If no usable graph is given
        """
        config.validate_consistency()
        if graph is None:
            raise GraphUnavailableError("No graph selected")
        graph.validate()

        self.config = config
        self.graph = graph
        self.observer = observer
        self.fitness_function = fitness_function or CoverFitness(graph)
        self.logger = logger or self._setup_logger()

        # Each run draws only from its own generator
        self.rng = np.random.default_rng(config.random_seed)

        self.state = RunState.SEEDING
        self.population: Optional[Population] = None
        self.top_individual_ever: Optional[Individual] = None
        self.generation = 0
        self.catastrophe_countdown = config.catastrophe.stagnation_generations
        self.last_best_fitness = float("-inf")
        self.catastrophes = 0

        self._dispatcher: Optional[ObserverDispatcher] = None

    def _setup_logger(self) -> logging.Logger:
        """Setup default logger."""
        logger = logging.getLogger("cover.engine")
        logger.setLevel(getattr(logging, self.config.logging.log_level))

        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def run(self, cancel_event: Optional[threading.Event] = None) -> RunResult:
        """
        Run the evolution to completion or until cancelled.

        Args:
            cancel_event: Checked once per generation boundary

        Returns:
            The run result
        """
        cancel_event = cancel_event or threading.Event()
        self._dispatcher = ObserverDispatcher(self.observer)
        params = self.config.evolution

        try:
            with logfire.span("Cover Evolution",
                              population_size=params.population_size,
                              generations=params.generations,
                              node_count=self.graph.node_count,
                              edge_count=self.graph.edge_count):

                start = time.perf_counter()
                self._seed_population()
                initial_avg = self.population.average_fitness()
                initial_best = self.population.best_individual().fitness

                self.state = RunState.RUNNING
                for generation in range(params.generations):
                    if cancel_event.is_set():
                        self.state = RunState.INTERRUPTED
                        self.logger.info(f"Evolution interrupted before generation {generation}")
                        break

                    self.generation = generation
                    with logfire.span("Generation", generation=generation):
                        self._report_progress(generation)
                        self._check_stagnation()

                        if self.catastrophe_countdown < 1:
                            next_generation = self._catastrophe_generation()
                            self.catastrophe_countdown = self.config.catastrophe.stagnation_generations
                        else:
                            next_generation = self._create_next_generation()

                        self.population.replace_all(next_generation)

                        best = self.population.best_individual()
                        if best.sort_key > self.top_individual_ever.sort_key:
                            self.top_individual_ever = best.deep_copy()

                        if generation % self.config.logging.log_interval == 0:
                            self._log_progress(generation)
                else:
                    self.state = RunState.COMPLETED
                    self._report_progress(params.generations, redraw=True)

                elapsed_millis = (time.perf_counter() - start) * 1000
                return self._build_result(initial_avg, initial_best, elapsed_millis)
        except Exception:
            self.logger.exception("Evolution run failed")
            raise
        finally:
            self._dispatcher.notify("on_run_finished")
            self._dispatcher.close()

    def _seed_population(self) -> None:
        """Build the annealing-seeded first generation."""
        self._dispatcher.notify("on_seeding_started")

        with logfire.span("Initialize Population"):
            self.population = Population(self.config, self.fitness_function, generation=0, rng=self.rng)
            self.population.initialize()

        self.top_individual_ever = self.population.best_individual().deep_copy()
        self.last_best_fitness = self.population.refresh_best_fitness()
        self.catastrophe_countdown = self.config.catastrophe.stagnation_generations

        self.logger.info(f"Initialized population with {len(self.population)} individuals")
        self._dispatcher.notify("on_seeding_finished")

    def _report_progress(self, generation: int, redraw: bool = False) -> None:
        """Queue generation-boundary notifications for the observer."""
        best = self.population.best_individual()
        stats = self.population.vertex_cover_stats(best)

        self._dispatcher.notify(
            "on_fitness_update",
            self.population.average_fitness(),
            best.fitness,
            generation
        )
        self._dispatcher.notify("on_generation_advance", generation)
        self._dispatcher.notify("on_cover_update", self.graph.node_count, stats.selected_nodes)
        self._dispatcher.notify("on_edge_coverage_update", self.graph.edge_count, stats.uncovered_edges)

        if redraw or generation % self.config.logging.redraw_interval == 0:
            self._dispatcher.notify("on_best_individual", best.deep_copy())

    def _check_stagnation(self) -> None:
        """Count down to a catastrophe while the best fitness does not move."""
        best_fitness = self.population.refresh_best_fitness()
        if best_fitness == self.last_best_fitness:
            self.catastrophe_countdown -= 1
        else:
            self.last_best_fitness = best_fitness
            self.catastrophe_countdown = self.config.catastrophe.stagnation_generations

    def _catastrophe_generation(self) -> List[Individual]:
        """
        Replace most of the population with fresh random individuals.

        A few roulette-selected survivors and the best individual ever found
        are carried over.
        """
        size = self.config.evolution.population_size
        survivors = self.population.select_individuals(
            min(self.config.catastrophe.survivors, size - 1)
        )

        new_individuals = [ind.deep_copy() for ind in survivors]
        new_individuals.append(self.top_individual_ever.deep_copy())
        while len(new_individuals) < size:
            new_individuals.append(Individual.random(self.fitness_function, self.rng))

        self.catastrophes += 1
        self.logger.warning(
            f"Catastrophe at generation {self.generation}: "
            f"best fitness stuck at {self.last_best_fitness:.2f}"
        )
        return new_individuals[:size]

    def _create_next_generation(self) -> List[Individual]:
        """Elitism, reproduction and deterministic crowding."""
        params = self.config.evolution
        size = params.population_size

        new_individuals = [self.population.best_individual().deep_copy()]
        reinserted = set()

        while len(new_individuals) < size:
            parents = self.population.select_individuals(2)

            if self.rng.random() < params.crossover_probability:
                offspring = parents[0].crossover(parents[1], self.config.crossover, self.rng)
            else:
                offspring = (parents[0].deep_copy(), parents[1].deep_copy())

            for child in offspring:
                child.mutate(params.mutation_probability, self.rng)
            for child in offspring:
                if len(new_individuals) < size:
                    new_individuals.append(child)

            for child in offspring:
                self._crowd(child, parents, new_individuals, reinserted)

        return new_individuals

    def _crowd(
        self,
        child: Individual,
        parents: List[Individual],
        new_individuals: List[Individual],
        reinserted: set
    ) -> None:
        """Keep the nearer parent alongside a child that did not beat it."""
        if child.hamming_distance(parents[0]) < child.hamming_distance(parents[1]):
            nearer = parents[0]
        else:
            nearer = parents[1]

        if child.fitness > nearer.fitness:
            return
        if len(new_individuals) >= self.config.evolution.population_size:
            return
        if id(nearer) in reinserted:
            return

        new_individuals.append(nearer.deep_copy())
        reinserted.add(id(nearer))

    def _log_progress(self, generation: int) -> None:
        """Log evolution progress."""
        best = self.population.best_individual()
        avg = self.population.average_fitness()

        self.logger.info(
            f"Generation {generation}: "
            f"Best: {best.fitness:.4f}, "
            f"Avg: {avg:.4f}, "
            f"Top ever: {self.top_individual_ever.fitness:.4f}"
        )

        if self.config.logging.metrics_export:
            stats = self.population.calculate_statistics()
            diversity = self.population.calculate_diversity()
            logfire.info(
                "Evolution Progress",
                evolution_generation=generation,
                catastrophe_countdown=self.catastrophe_countdown,
                **{k: v for k, v in stats.items() if k != "generation"},
                **diversity
            )

    def _build_result(self, initial_avg: float, initial_best: float, elapsed_millis: float) -> RunResult:
        """Assemble and log the final report."""
        final_best = self.population.best_individual()
        final_avg = self.population.average_fitness()
        stats = self.population.calculate_statistics()
        stats.update(self.population.calculate_diversity())
        stats["catastrophes"] = self.catastrophes

        result = RunResult(
            state=self.state,
            generations_completed=self.population.generation,
            best_individual_ever=self.top_individual_ever.deep_copy(),
            final_best_individual=final_best.deep_copy(),
            elapsed_millis=elapsed_millis,
            initial_average_fitness=initial_avg,
            initial_best_fitness=initial_best,
            final_population_stats=stats,
            avg_fitness_pct_of_initial=_pct_of(final_avg, initial_avg),
            best_fitness_pct_of_initial=_pct_of(final_best.fitness, initial_best)
        )

        self.logger.info(f"Evolution {self.state.value} after {elapsed_millis / 1000.0:.3f} s")
        self.logger.info(
            f"avgFit(G:0)={initial_avg:.4f} avgFit(G:{result.generations_completed})={final_avg:.4f}"
            + (f" -> {result.avg_fitness_pct_of_initial:.2f} %" if result.avg_fitness_pct_of_initial is not None else "")
        )
        self.logger.info(
            f"bestFit(G:0)={initial_best:.4f} bestFit(G:{result.generations_completed})={final_best.fitness:.4f}"
            + (f" -> {result.best_fitness_pct_of_initial:.2f} %" if result.best_fitness_pct_of_initial is not None else "")
        )
        self.logger.info(f"Best individual of all times: fitness={self.top_individual_ever.fitness:.4f}")
        logfire.info("Evolution Finished", **{k: v for k, v in result.to_dict().items()
                                              if k not in ("best_individual_ever", "final_best_individual")})
        return result


class RunHandle:
    """Handle to an evolution running on its own worker thread."""

    def __init__(
        self,
        engine: CoverEvolutionEngine,
        future: Future,
        cancel_event: threading.Event,
        executor: ThreadPoolExecutor
    ):
        self.engine = engine
        self._future = future
        self._cancel_event = cancel_event
        self._executor = executor
        future.add_done_callback(lambda _: executor.shutdown(wait=False))

    @property
    def state(self) -> RunState:
        return self.engine.state

    def cancel(self) -> None:
        """Request cancellation; honoured at the next generation boundary."""
        self._cancel_event.set()

    def done(self) -> bool:
        return self._future.done()

    def result(self, timeout: Optional[float] = None) -> RunResult:
        """Block until the run ends and return its result (or raise its error)."""
        return self._future.result(timeout=timeout)

    async def wait(self) -> RunResult:
        """Await the run from asyncio code without blocking the event loop."""
        return await asyncio.wrap_future(self._future)


def start(
    config: CoverConfig,
    graph: StateSpace,
    observer: Optional[ProgressObserver] = None
) -> RunHandle:
    """
    Validate the inputs and start a run on a dedicated worker thread.

    Raises:
        ConfigurationError: If the configuration is invalid
        GraphUnavailableError: If no usable graph is given
    """
    engine = CoverEvolutionEngine(config, graph, observer)
    cancel_event = threading.Event()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="cover-evolution")
    future = executor.submit(engine.run, cancel_event)
    return RunHandle(engine, future, cancel_event, executor)
