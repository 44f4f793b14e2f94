"""Small training sets for weight evolution experiments."""

from .toy import (
    TRUTH_TABLES,
    logic_gate,
    noisy_xor,
    get_dataset,
    list_datasets,
)

__all__ = [
    'TRUTH_TABLES',
    'logic_gate',
    'noisy_xor',
    'get_dataset',
    'list_datasets',
]
