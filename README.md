# heapstore

Fixed-size pages (4096 bytes) for a small database engine. Each page can be
used as a slotted heap page that holds variable-length records.

Each page starts with a 16-byte header that holds the page id, a log
sequence number (LSN) and a checksum. A heap page keeps its own metadata and
slot table after that header and stores record bytes packed from the end of
the page.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Pages

```python
from heapstore.page import Page
from heapstore.ids import Lsn

page = Page(7)
page.page_id                # 7
page.lsn                    # Lsn(page_id=0, slot_id=0)
page.lsn = Lsn(1, 2)        # only moves forward; a smaller LSN is ignored
page.update_checksum()
page.checksum               # CRC-16 of the page, taken with the checksum field zeroed

raw = page.to_bytes()       # exactly 4096 bytes
same = Page.from_bytes(raw) # ValueError if not exactly 4096 bytes
print(same.dump())          # readable hex dump; runs of zero lines are hidden
```

`Page.empty()` makes a page of zero bytes. `copy()` gives an independent
copy. `body()` is a writable view of the bytes after the fixed header.
`compare_page(other_bytes)` lists `(offset, bytes)` runs where this page
differs from the given bytes; a run reaching the very end of the page is not
reported.

## Heap pages

`HeapPage` is a `Page` with slotted storage. A new `HeapPage` is ready to use;
`init_heap_page()` resets it to hold no values.

```python
from heapstore.heap_page import HeapPage

page = HeapPage(0)

slot = page.add_value(b"hello")      # 0; returns None when the value does not fit
page.get_value(slot)                 # b"hello"; None for a slot not in use
page.update_value(slot, b"bye")      # True; False if the slot is not in use or there is no room
page.delete_value(slot)              # True; False if the slot was not in use
page.add_value(b"again")             # reuses the lowest free slot id: 0

for data, slot_id in page.iter():    # in slot order; iterating the page does the same
    ...

page.values()                        # all stored values in slot order
page.header_size()
page.free_space()
```

New values always get the lowest free slot id. The space of deleted or
shrunk values is reclaimed by compacting the data region when needed.

The header takes the 16-byte page header, 8 bytes of heap metadata and 4
bytes for each slot ever allocated. `free_space()` is the page size minus
that header and the bytes of the stored values.

## Identifiers

`heapstore.ids` holds the shared identifier types and constants
(`PAGE_SIZE`, `PAGE_SLOTS`, `MAX_COLUMNS` and others):

* `ValueId`, with `for_page` and `for_slot` constructors, and compact
  (`to_bytes`), fixed ten-byte (`to_fixed_bytes`, no segment ids) and
  container/page (`to_cp_bytes`) encodings, all read back by `from_bytes`.
* `TransactionId` (each new one takes the next number; `TransactionId.system()`
  is 0), `Lsn` (ordered), `ContainerPageId`, `Permissions`, `StateType`,
  `StateMeta` and `StateInfo`.

## Errors

`heapstore.errors` defines `CrustyError` and its subclasses, such as
`StorageError`, `ValidationError`, `ExecutionError` and
`TransactionRollbackError`; `c_err(message)` builds a `GeneralError`.
`ConversionError`, a separate exception, reports a problem found while
converting a record, with a `kind` such as `ConversionError.PARSE_ERROR`.

## Workloads

`heapstore.workload` builds random mixes of `Insert`, `Delete`, `Update`,
`Read` and `Scan` operations with `gen_page_bench_workload(rng, num_ops,
min_size, max_size)`. `bench_page_mixed()` replays such a mix against one
heap page and returns it; `bench_page_insert()` fills a fresh page.

`heapstore.testutil` makes random and ascending byte records and compares
lists of records regardless of order. `get_rng()` reads its seed from the
`CRUSTY_SEED` environment variable when that is set to a valid number.

## What it does not do

The package works on single pages in memory. It has no buffer pool, no
files or storage manager that keep pages on disk, no transactions or
locking, and no command-line program.