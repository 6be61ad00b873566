"""Fixed-size page with a small header holding the page id, LSN and checksum."""

from __future__ import annotations

import binascii
import struct
from typing import List, Tuple

from heapstore.ids import CHECKSUM_SIZE, PAGE_ID_SIZE, PAGE_SIZE, SLOT_ID_SIZE, Lsn

__all__ = [
    "OFFSET_NUM_BYTES",
    "PAGE_ID_OFFSET",
    "LSN_PAGE_OFFSET",
    "LSN_SLOT_OFFSET",
    "CHECKSUM_OFFSET",
    "PAGE_FIXED_HEADER_LEN",
    "Page",
]

OFFSET_NUM_BYTES = 2
"""How many bytes are in an in-page offset."""

PAGE_ID_OFFSET = 0
LSN_PAGE_OFFSET = PAGE_ID_SIZE
LSN_SLOT_OFFSET = LSN_PAGE_OFFSET + PAGE_ID_SIZE
CHECKSUM_OFFSET = LSN_SLOT_OFFSET + SLOT_ID_SIZE

PAGE_FIXED_HEADER_LEN = 16
"""Bytes reserved at the start of every page for the fixed header."""

_BYTES_PER_LINE = 40

assert CHECKSUM_OFFSET + CHECKSUM_SIZE <= PAGE_FIXED_HEADER_LEN


class Page:
    """A page of exactly PAGE_SIZE bytes.

    The first PAGE_FIXED_HEADER_LEN bytes hold the little-endian page id,
    the LSN (page id then slot id) and the checksum.
    """

    __slots__ = ("_data",)

    def __init__(self, page_id: int) -> None:
        self._data = bytearray(PAGE_SIZE)
        self.page_id = page_id

    @classmethod
    def empty(cls) -> "Page":
        """A page whose bytes are all zero."""
        return cls.from_bytes(bytes(PAGE_SIZE))

    @classmethod
    def from_bytes(cls, data: bytes) -> "Page":
        """Build a page from exactly PAGE_SIZE bytes."""
        if len(data) != PAGE_SIZE:
            raise ValueError(f"a page needs {PAGE_SIZE} bytes, got {len(data)}")
        page = cls.__new__(cls)
        page._data = bytearray(data)
        return page

    @property
    def page_id(self) -> int:
        """The id of this page."""
        return struct.unpack_from("<I", self._data, PAGE_ID_OFFSET)[0]

    @page_id.setter
    def page_id(self, page_id: int) -> None:
        try:
            struct.pack_into("<I", self._data, PAGE_ID_OFFSET, page_id)
        except struct.error as exc:
            raise ValueError(f"invalid page id: {page_id!r}") from exc

    @property
    def lsn(self) -> Lsn:
        """The log sequence number of the last update to this page."""
        page_id, slot_id = struct.unpack_from("<IH", self._data, LSN_PAGE_OFFSET)
        return Lsn(page_id, slot_id)

    @lsn.setter
    def lsn(self, lsn: Lsn) -> None:
        """Store ``lsn`` only if it is greater than the current one."""
        if lsn > self.lsn:
            try:
                struct.pack_into("<IH", self._data, LSN_PAGE_OFFSET, lsn.page_id, lsn.slot_id)
            except struct.error as exc:
                raise ValueError(f"invalid lsn: {lsn}") from exc

    @property
    def checksum(self) -> int:
        """The stored checksum; 0 until update_checksum is called."""
        return struct.unpack_from("<H", self._data, CHECKSUM_OFFSET)[0]

    def update_checksum(self) -> None:
        """Compute a CRC-16 over the page with the checksum field zeroed, and store it."""
        end = CHECKSUM_OFFSET + CHECKSUM_SIZE
        self._data[CHECKSUM_OFFSET:end] = bytes(CHECKSUM_SIZE)
        crc = binascii.crc_hqx(bytes(self._data), 0)
        struct.pack_into("<H", self._data, CHECKSUM_OFFSET, crc)

    def to_bytes(self) -> bytes:
        """A copy of all PAGE_SIZE bytes of the page."""
        return bytes(self._data)

    def body(self) -> memoryview:
        """A writable view of the bytes after the fixed header."""
        return memoryview(self._data)[PAGE_FIXED_HEADER_LEN:]

    def compare_page(self, other_page: bytes) -> List[Tuple[int, bytes]]:
        """List the differing runs as (offset, this page's bytes).

        A run that extends to the very end of the page is not reported.
        """
        mine = self._data
        if len(mine) != len(other_page):
            raise ValueError(
                f"pages differ in size: {len(mine)} and {len(other_page)} bytes"
            )
        result = []
        start = None
        for i, (b1, b2) in enumerate(zip(mine, other_page)):
            if b1 != b2:
                if start is None:
                    start = i
            elif start is not None:
                result.append((start, bytes(mine[start:i])))
                start = None
        return result

    def copy(self) -> "Page":
        """An independent copy of this page."""
        return type(self).from_bytes(self._data)

    def dump(self) -> str:
        """A readable hex dump of the page, with runs of all-zero lines collapsed."""
        lines = [f"PID:{self.page_id} LSN:{self.lsn} Checksum:{self.checksum}\n"]
        empty_run = 0
        zero_line = bytes(_BYTES_PER_LINE)
        for pos in range(0, len(self._data), _BYTES_PER_LINE):
            chunk = bytes(self._data[pos : pos + _BYTES_PER_LINE])
            if chunk == zero_line:
                empty_run += 1
                continue
            if empty_run:
                lines.append(f"{empty_run} empty lines were hidden\n")
                empty_run = 0
            cells = "".join(_cell(b) for b in chunk)
            lines.append(f"[{pos:4}] {cells}\n")
        if empty_run:
            lines.append(f"{empty_run} empty lines were hidden\n")
        return "".join(lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Page):
            return NotImplemented
        return self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(page_id={self.page_id}, lsn={self.lsn})"


def _cell(byte: int) -> str:
    if byte == 0x00:
        return ".  "
    if byte == 0xFF:
        return "## "
    return f"{byte:02x} "