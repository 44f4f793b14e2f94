"""
Canonical layout of network weights inside a chromosome.

Genes are ordered layer-major, then by source neuron, then by destination
neuron. Within a layer the bias unit comes after the regular neurons, which
is how ``FeedForwardNetwork`` addresses it. The length calculation and the
loading step both walk this same order.

Example, layers [3, 2] with a biased input layer::

    (0, 0, 0) (0, 0, 1) (0, 1, 0) (0, 1, 1) (0, 2, 0) (0, 2, 1) (0, 3, 0) (0, 3, 1)
                                                                 ^ bias unit

which is (3 + 1) * 2 = 8 genes.
"""

from typing import Iterator, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from .errors import InvalidRepresentationError


@runtime_checkable
class Topology(Protocol):
    """What a chromosome needs from a network."""

    @property
    def layer_count(self) -> int: ...

    def layer_neuron_count(self, layer: int) -> int: ...

    def is_layer_biased(self, layer: int) -> bool: ...

    def set_weight(self, layer: int, from_neuron: int, to_neuron: int, value: float) -> None: ...


@runtime_checkable
class ReadableTopology(Topology, Protocol):
    """A topology whose current weights can be read back."""

    def get_weight(self, layer: int, from_neuron: int, to_neuron: int) -> float: ...


def iter_weight_positions(topology: Topology) -> Iterator[Tuple[int, int, int]]:
    """Yield (layer, from_neuron, to_neuron) in canonical gene order."""
    for layer in range(topology.layer_count - 1):
        bias = 1 if topology.is_layer_biased(layer) else 0
        for from_neuron in range(topology.layer_neuron_count(layer) + bias):
            for to_neuron in range(topology.layer_neuron_count(layer + 1)):
                yield layer, from_neuron, to_neuron


def expected_length(topology: Topology) -> int:
    """Number of genes a chromosome for ``topology`` must have."""
    total = 0
    for layer in range(topology.layer_count - 1):
        bias = 1 if topology.is_layer_biased(layer) else 0
        total += (topology.layer_neuron_count(layer) + bias) * topology.layer_neuron_count(layer + 1)
    return total


def is_valid(genes: Optional[Sequence[float]], topology: Topology) -> bool:
    return genes is not None and len(genes) == expected_length(topology)


def check_length(genes: Optional[Sequence[float]], topology: Topology) -> None:
    """Raise InvalidRepresentationError unless ``genes`` fits ``topology``."""
    expected = expected_length(topology)
    actual = None if genes is None else len(genes)
    if actual != expected:
        raise InvalidRepresentationError(expected, actual)


def load_weights(genes: Sequence[float], topology: Topology) -> None:
    """
    Write every gene into the topology, in canonical order.

    The length is checked before the first write, so a mismatched sequence
    leaves the topology untouched.
    """
    check_length(genes, topology)
    for index, (layer, from_neuron, to_neuron) in enumerate(iter_weight_positions(topology)):
        topology.set_weight(layer, from_neuron, to_neuron, genes[index])


def read_weights(topology: ReadableTopology) -> List[float]:
    """Current weights of ``topology`` in canonical order."""
    return [
        float(topology.get_weight(layer, from_neuron, to_neuron))
        for layer, from_neuron, to_neuron in iter_weight_positions(topology)
    ]
