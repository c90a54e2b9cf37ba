"""
Chromosome Representation for the Vertex Cover Genetic Algorithm.

A chromosome is a fixed-length boolean vector with one gene per graph node;
a true gene means the node belongs to the cover.
"""

from typing import List, Dict, Any, Optional
import hashlib

import numpy as np


def resolve_rng(rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    """Return ``rng``, or a freshly seeded generator when none is given."""
    return rng if rng is not None else np.random.default_rng()


class CoverChromosome:
    """
    Boolean node-membership genome.

    The chromosome itself knows nothing about the graph; feasibility is
    restored by the fitness function's repair step.
    """

    __slots__ = ("genes",)

    def __init__(self, genes: np.ndarray):
        self.genes = np.asarray(genes, dtype=bool)

    @classmethod
    def empty(cls, size: int) -> "CoverChromosome":
        """All-false genome (no node selected)."""
        return cls(np.zeros(size, dtype=bool))

    @classmethod
    def random(cls, size: int, rng: Optional[np.random.Generator] = None) -> "CoverChromosome":
        """Genome with every gene drawn from a fair coin flip."""
        return cls(resolve_rng(rng).random(size) < 0.5)

    @property
    def chromosome_id(self) -> str:
        """Content hash of the genome; equal genomes share an id."""
        return hashlib.sha1(np.packbits(self.genes).tobytes() + str(self.genes.size).encode()).hexdigest()[:12]

    def flip(self, index: int) -> None:
        self.genes[index] = not self.genes[index]

    def reset_genes(self, rate: float, rng: Optional[np.random.Generator] = None) -> int:
        """
        Reset each gene to a fresh random value with probability ``rate``.

        A reset that draws the current value leaves the gene unchanged.

        Returns:
            Number of genes that actually changed
        """
        size = self.genes.size
        rng = resolve_rng(rng)
        reset = rng.random(size) < rate
        drawn = rng.random(size) < 0.5
        changed = int(np.count_nonzero(reset & (drawn != self.genes)))
        self.genes[reset] = drawn[reset]
        return changed

    def hamming_distance(self, other: "CoverChromosome") -> int:
        """Number of positions at which the two genomes differ."""
        return int(np.count_nonzero(self.genes != other.genes))

    def selected_nodes(self) -> List[int]:
        return np.flatnonzero(self.genes).tolist()

    def clone(self) -> "CoverChromosome":
        """Create an independent copy of this chromosome."""
        return CoverChromosome(self.genes.copy())

    def to_dict(self) -> Dict[str, Any]:
        """Convert chromosome to dictionary."""
        return {
            "chromosome_id": self.chromosome_id,
            "size": int(self.genes.size),
            "selected_nodes": self.selected_nodes(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CoverChromosome":
        """Create chromosome from dictionary."""
        chromosome = cls.empty(data["size"])
        chromosome.genes[data["selected_nodes"]] = True
        return chromosome

    def __len__(self) -> int:
        return int(self.genes.size)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CoverChromosome):
            return NotImplemented
        return np.array_equal(self.genes, other.genes)

    __hash__ = None  # genes are mutable

    def __repr__(self) -> str:
        return f"CoverChromosome(size={len(self)}, selected={int(np.count_nonzero(self.genes))})"
