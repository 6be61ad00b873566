"""Slotted heap page: variable-length values addressed by stable slot ids."""

from __future__ import annotations

import struct
from typing import Dict, Iterator, List, Optional, Tuple

from heapstore.ids import PAGE_SIZE
from heapstore.page import PAGE_FIXED_HEADER_LEN, Page

__all__ = [
    "SLOT_METADATA_SIZE",
    "HEAP_PAGE_FIXED_METADATA_SIZE",
    "HeapPage",
]

SLOT_METADATA_SIZE = 4
"""Bytes of header used by each slot: a u16 offset and a u16 length."""
HEAP_PAGE_FIXED_METADATA_SIZE = 8
"""Bytes of heap metadata kept after the fixed page header."""

_META = struct.Struct("<HH")  # slot count, start of the data region
_SLOT = struct.Struct("<HH")  # offset, length
_META_OFFSET = PAGE_FIXED_HEADER_LEN
_SLOTS_OFFSET = PAGE_FIXED_HEADER_LEN + HEAP_PAGE_FIXED_METADATA_SIZE
_DELETED = 0


class HeapPage(Page):
    """A page storing values packed from the end, with a slot table after the header.

    Each slot records the offset and length of its value; an offset of zero marks
    a deleted slot, whose id is reused by the next insertion. Space freed by
    deletions and shrinking updates is reclaimed by compacting the data region.
    A page whose heap metadata is all zero is a valid empty heap page.
    """

    __slots__ = ()

    def __init__(self, page_id: int) -> None:
        super().__init__(page_id)
        self.init_heap_page()

    def init_heap_page(self) -> None:
        """Reset the heap metadata so the page holds no values."""
        self._set_meta(0, PAGE_SIZE)

    # -- metadata helpers -------------------------------------------------

    def _meta(self) -> Tuple[int, int]:
        num_slots, data_start = _META.unpack_from(self._data, _META_OFFSET)
        return num_slots, data_start or PAGE_SIZE

    def _set_meta(self, num_slots: int, data_start: int) -> None:
        _META.pack_into(self._data, _META_OFFSET, num_slots, data_start)

    def _slot(self, slot_id: int) -> Tuple[int, int]:
        return _SLOT.unpack_from(self._data, _SLOTS_OFFSET + slot_id * SLOT_METADATA_SIZE)

    def _set_slot(self, slot_id: int, offset: int, length: int) -> None:
        _SLOT.pack_into(
            self._data, _SLOTS_OFFSET + slot_id * SLOT_METADATA_SIZE, offset, length
        )

    def _live_slots(self) -> Iterator[Tuple[int, int, int]]:
        num_slots, _ = self._meta()
        for slot_id in range(num_slots):
            offset, length = self._slot(slot_id)
            if offset != _DELETED:
                yield slot_id, offset, length

    def _locate(self, slot_id: int) -> Optional[Tuple[int, int]]:
        num_slots, _ = self._meta()
        if not 0 <= slot_id < num_slots:
            return None
        offset, length = self._slot(slot_id)
        if offset == _DELETED:
            return None
        return offset, length

    def _first_free_slot(self) -> Optional[int]:
        num_slots, _ = self._meta()
        return next(
            (s for s in range(num_slots) if self._slot(s)[0] == _DELETED), None
        )

    def _compact(self) -> None:
        """Pack every live value against the end of the page."""
        live = sorted(self._live_slots(), key=lambda entry: entry[1], reverse=True)
        values: Dict[int, bytes] = {
            slot_id: bytes(self._data[offset : offset + length])
            for slot_id, offset, length in live
        }
        end = PAGE_SIZE
        for slot_id, _, length in live:
            start = end - length
            self._data[start:end] = values[slot_id]
            self._set_slot(slot_id, start, length)
            end = start
        num_slots, _ = self._meta()
        self._set_meta(num_slots, end)

    def _place(self, slot_id: int, value: bytes, header_end: int) -> None:
        """Write ``value`` into the data region, compacting first if the gap is short."""
        _, data_start = self._meta()
        if data_start - header_end < len(value):
            self._compact()
        num_slots, data_start = self._meta()
        start = data_start - len(value)
        self._data[start:data_start] = value
        self._set_slot(slot_id, start, len(value))
        self._set_meta(num_slots, start)

    # -- public interface -------------------------------------------------

    def add_value(self, data: bytes) -> Optional[int]:
        """Store ``data`` in the lowest free slot; return its slot id, or None if it does not fit."""
        value = bytes(data)
        slot_id = self._first_free_slot()
        is_new = slot_id is None
        needed = len(value) + (SLOT_METADATA_SIZE if is_new else 0)
        if needed > self.free_space():
            return None
        num_slots, data_start = self._meta()
        if is_new:
            slot_id = num_slots
            num_slots += 1
            self._set_meta(num_slots, data_start)
            # Reserve the slot entry so compaction leaves it alone.
            self._set_slot(slot_id, _DELETED, 0)
        self._place(slot_id, value, self.header_size())
        return slot_id

    def get_value(self, slot_id: int) -> Optional[bytes]:
        """Return the bytes stored in ``slot_id``, or None if the slot is not in use."""
        location = self._locate(slot_id)
        if location is None:
            return None
        offset, length = location
        return bytes(self._data[offset : offset + length])

    def delete_value(self, slot_id: int) -> bool:
        """Free ``slot_id`` and its space; return whether the slot was in use."""
        if self._locate(slot_id) is None:
            return False
        self._set_slot(slot_id, _DELETED, 0)
        return True

    def update_value(self, slot_id: int, data: bytes) -> bool:
        """Replace the value in ``slot_id``.

        Returns False, leaving the old value, if the slot is not in use or the
        new value does not fit.
        """
        location = self._locate(slot_id)
        if location is None:
            return False
        value = bytes(data)
        offset, length = location
        if len(value) <= length:
            self._data[offset : offset + len(value)] = value
            self._set_slot(slot_id, offset, len(value))
            return True
        if len(value) - length > self.free_space():
            return False
        self._set_slot(slot_id, _DELETED, 0)
        self._place(slot_id, value, self.header_size())
        return True

    def header_size(self) -> int:
        """Bytes used by the fixed header, heap metadata and slot table."""
        num_slots, _ = self._meta()
        return _SLOTS_OFFSET + num_slots * SLOT_METADATA_SIZE

    def free_space(self) -> int:
        """Bytes available for values, counting space reclaimable by compaction."""
        used = sum(length for _, _, length in self._live_slots())
        return PAGE_SIZE - self.header_size() - used

    def iter(self) -> Iterator[Tuple[bytes, int]]:
        """Yield ``(value, slot_id)`` for every stored value in slot order."""
        for slot_id, offset, length in list(self._live_slots()):
            yield bytes(self._data[offset : offset + length]), slot_id

    def __iter__(self) -> Iterator[Tuple[bytes, int]]:
        return self.iter()

    def values(self) -> List[bytes]:
        """All stored values in slot order."""
        return [value for value, _ in self.iter()]