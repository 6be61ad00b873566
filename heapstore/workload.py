"""Page benchmark workloads: generating mixed operations and replaying them on a heap page."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Union

from heapstore.heap_page import HeapPage
from heapstore.testutil import get_random_vec_of_byte_vec

__all__ = [
    "Insert",
    "Delete",
    "Update",
    "Read",
    "Scan",
    "BenchOp",
    "SEED_INSERTS",
    "bench_page_insert",
    "gen_page_bench_workload",
    "bench_page_mixed",
]

SEED_INSERTS = 5
"""Number of inserts that always open a generated workload."""


@dataclass(frozen=True)
class Insert:
    """Add a value to the page."""

    data: bytes


@dataclass(frozen=True)
class Delete:
    """Delete the value in a slot."""

    slot_id: int


@dataclass(frozen=True)
class Update:
    """Replace the value in a slot."""

    slot_id: int
    data: bytes


@dataclass(frozen=True)
class Read:
    """Read the value in a slot."""

    slot_id: int


@dataclass(frozen=True)
class Scan:
    """Iterate over every value on the page."""


BenchOp = Union[Insert, Delete, Update, Read, Scan]


def bench_page_insert(vals: Iterable[bytes]) -> HeapPage:
    """Insert every value into a fresh page with id 0 and return the page.

    Raises ValueError if a value does not fit.
    """
    page = HeapPage(0)
    for value in vals:
        if page.add_value(value) is None:
            raise ValueError(f"value of {len(value)} bytes does not fit on the page")
    return page


def gen_page_bench_workload(
    rng: random.Random, num_ops: int, min_size: int, max_size: int
) -> List[BenchOp]:
    """Generate ``num_ops`` operations, starting with SEED_INSERTS inserts.

    After the seed inserts the mix is 20% inserts, 10% deletes, 20% updates,
    10% scans and 40% reads; slot ids are drawn below the number of inserts
    issued so far.
    """
    if num_ops < SEED_INSERTS:
        raise ValueError(f"a workload needs at least {SEED_INSERTS} operations, got {num_ops}")
    random_bytes = get_random_vec_of_byte_vec(rng, num_ops, min_size, max_size)
    ops: List[BenchOp] = []
    expected_max_slot = 0
    for _ in range(SEED_INSERTS):
        expected_max_slot += 1
        ops.append(Insert(random_bytes.pop()))
    for _ in range(SEED_INSERTS, num_ops):
        choice = rng.randrange(100)
        op: BenchOp
        if choice < 20:
            expected_max_slot += 1
            op = Insert(random_bytes.pop())
        elif choice < 30:
            op = Delete(rng.randrange(expected_max_slot))
        elif choice < 50:
            op = Update(rng.randrange(expected_max_slot), random_bytes.pop())
        elif choice < 60:
            op = Scan()
        else:
            op = Read(rng.randrange(expected_max_slot))
        ops.append(op)
    return ops


def bench_page_mixed(workload: Sequence[BenchOp]) -> HeapPage:
    """Replay ``workload`` on a fresh page with id 23500 and return the page."""
    page = HeapPage(23500)
    page.init_heap_page()
    for op in workload:
        if isinstance(op, Insert):
            page.add_value(op.data)
        elif isinstance(op, Delete):
            page.delete_value(op.slot_id)
        elif isinstance(op, Update):
            page.update_value(op.slot_id, op.data)
        elif isinstance(op, Read):
            page.get_value(op.slot_id)
        elif isinstance(op, Scan):
            for _ in page.iter():
                pass
        else:
            raise TypeError(f"unknown workload operation: {op!r}")
    return page