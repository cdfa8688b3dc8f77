# core/analyzer.py

from functools import reduce
from typing import List, Sequence

from .models import LoadedFile


def find_shared_columns(files: Sequence[LoadedFile]) -> List[str]:
    """
    Column names present in every loaded file, sorted ordinally.

    Names are compared exactly as cleaned; no case folding happens here.
    """
    column_sets = [set(f.columns) for f in files if f.is_loaded]
    if not column_sets:
        return []

    shared = reduce(lambda acc, cols: acc & cols, column_sets)
    return sorted(shared)
