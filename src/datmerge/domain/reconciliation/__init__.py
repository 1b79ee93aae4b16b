"""Reconciliation core: duplicate detection, bucketing and multi-catalog diffing.

Flow for a run over N inputs:
1) admit parsed records into per-input catalogs (``domain.admission``)
2) fold the inputs into one working catalog (``diff.combine``)
3) bucket by hash and merge duplicates (``bucketing``, ``merge``)
4) route merged records into output catalogs (``diff``)
5) regroup each output by machine and resolve names for writing
"""

from __future__ import annotations

from .bucketing import BucketResult, bucket_by_hash, bucket_by_machine, bucket_for_write
from .diff import (
    DiffMode,
    DiffRequest,
    InputSource,
    OutputCatalog,
    combine,
    diff,
    diff_against,
    diff_cascade,
    diff_no_cascade,
    merge_no_diff,
    update,
)
from .keys import hash_key, machine_key
from .merge import duplicate_status, get_duplicates, has_duplicates, is_partial_match, merge
from .naming import item_sort_key, resolve_names, sort_items

__all__ = [
    "BucketResult",
    "DiffMode",
    "DiffRequest",
    "InputSource",
    "OutputCatalog",
    "bucket_by_hash",
    "bucket_by_machine",
    "bucket_for_write",
    "combine",
    "diff",
    "diff_against",
    "diff_cascade",
    "diff_no_cascade",
    "duplicate_status",
    "get_duplicates",
    "has_duplicates",
    "hash_key",
    "is_partial_match",
    "item_sort_key",
    "machine_key",
    "merge",
    "merge_no_diff",
    "resolve_names",
    "sort_items",
    "update",
]
