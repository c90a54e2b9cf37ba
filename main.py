"""
Evolutionary Vertex Cover - Main Entry Point

This module configures observability through Logfire and exposes a command
line interface for listing maps and running the evolutionary cover search
on one of them.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv
import logfire

# Load environment variables
load_dotenv()

from src.core.config import settings
from src.core.exceptions import CoverError
from src.evolution import LoggingObserver, RunState, start
from src.graph import discover_maps, load_map

# Configure Logfire for observability
logfire.configure(**settings.get_logfire_settings())


class ConsoleObserver(LoggingObserver):
    """Prints one progress line per reported generation."""

    def __init__(self, every: int = 10):
        super().__init__()
        self.every = every

    def on_seeding_started(self) -> None:
        click.echo("Generating first population...")

    def on_seeding_finished(self) -> None:
        click.echo("First population ready.")

    def on_fitness_update(self, avg_fitness: float, best_fitness: float, generation: int) -> None:
        if generation % self.every == 0:
            click.echo(f"gen: {generation}\t bestFit: {best_fitness:.2f}\t avgFit: {avg_fitness:.2f}")

    def on_cover_update(self, total_nodes: int, selected_nodes: int) -> None:
        self.logger.debug("Cover: %d/%d nodes selected", selected_nodes, total_nodes)


@click.group()
@click.version_option(version=settings.app_version)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx, verbose: bool):
    """
    Evolutionary Vertex Cover.

    Searches for small vertex covers with an annealing-seeded genetic algorithm.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    logging.basicConfig(
        level=logging.DEBUG if verbose or settings.debug else getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@cli.command()
@click.option("--maps-dir", default=settings.maps_dir, show_default=True, help="Map root directory")
def maps(maps_dir: str):
    """List available maps."""
    names = discover_maps(maps_dir)
    if not names:
        click.echo(f"No maps found in {maps_dir}")
        return
    for name in names:
        click.echo(name)


@cli.command()
@click.argument("map_name")
@click.option("--maps-dir", default=settings.maps_dir, show_default=True, help="Map root directory")
@click.option("--generations", "-g", type=int, default=None, help="Number of generations")
@click.option("--population", "-p", type=int, default=None, help="Population size")
@click.option("--mutation", "-m", type=float, default=None, help="Mutation probability")
@click.option("--crossover", "-x", type=float, default=None, help="Crossover probability")
@click.option("--seed", type=int, default=None, help="Random seed")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default=None, help="Write the result as JSON")
def run(
    map_name: str,
    maps_dir: str,
    generations: Optional[int],
    population: Optional[int],
    mutation: Optional[float],
    crossover: Optional[float],
    seed: Optional[int],
    output: Optional[str]
):
    """Run the evolution on MAP_NAME."""
    try:
        graph = load_map(Path(maps_dir) / map_name)
        config = settings.build_cover_config(
            generations=generations,
            population_size=population,
            mutation_probability=mutation,
            crossover_probability=crossover,
            random_seed=seed
        )
        handle = start(config, graph, ConsoleObserver())
    except CoverError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(f"Running {config.evolution.generations} generations on {map_name} ({graph!r})")
    try:
        result = handle.result()
    except KeyboardInterrupt:
        click.echo("Stopping after the current generation...")
        handle.cancel()
        result = handle.result()

    best = result.best_individual_ever
    stats = best.fitness_function.cover_stats(best.chromosome.genes)
    click.echo("========== Evolution finished ==========")
    click.echo(f"State: {result.state.value}")
    click.echo(f"Generations: {result.generations_completed}")
    click.echo(f"Elapsed: {result.elapsed_millis / 1000.0:.2f} s")
    click.echo(f"Best fitness ever: {best.fitness:.2f}")
    click.echo(f"Cover size: {stats.selected_nodes}/{graph.node_count} nodes, "
               f"{stats.uncovered_edges} uncovered edges")

    if output:
        with open(output, "w") as f:
            json.dump(result.to_dict(), f, indent=2)
        click.echo(f"Result written to {output}")

    if result.state is RunState.INTERRUPTED:
        sys.exit(130)


if __name__ == "__main__":
    cli()
