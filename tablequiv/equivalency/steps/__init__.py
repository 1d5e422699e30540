"""
Equivalency steps, in pipeline order.

The first step that claims a pair and reports it handled ends dispatch for
that pair, so specific steps come before generic ones.
"""

from .base import EquivalencyStep, find_match, select_members
from .collections import CollectionEquivalencyStep, DictionaryEquivalencyStep
from .dataset import DataSetEquivalencyStep
from .memberwise import MemberwiseEquivalencyStep
from .row import DataRowEquivalencyStep
from .simple import ReferenceEqualityStep, SimpleEqualityStep, values_equal
from .table import DataTableEquivalencyStep, compare_collection_members, compare_scalar_members


def default_steps() -> list[EquivalencyStep]:
    return [
        ReferenceEqualityStep(),
        DataSetEquivalencyStep(),
        DataTableEquivalencyStep(),
        DataRowEquivalencyStep(),
        DictionaryEquivalencyStep(),
        CollectionEquivalencyStep(),
        MemberwiseEquivalencyStep(),
        SimpleEqualityStep(),
    ]


__all__ = [
    "EquivalencyStep",
    "ReferenceEqualityStep",
    "DataSetEquivalencyStep",
    "DataTableEquivalencyStep",
    "DataRowEquivalencyStep",
    "DictionaryEquivalencyStep",
    "CollectionEquivalencyStep",
    "MemberwiseEquivalencyStep",
    "SimpleEqualityStep",
    "default_steps",
    "select_members",
    "find_match",
    "compare_scalar_members",
    "compare_collection_members",
    "values_equal",
]
