"""Identifiers for transactions, containers, pages, slots and values."""

from __future__ import annotations

import enum
import itertools
import struct
import threading
from dataclasses import dataclass, field
from typing import List, Optional

__all__ = [
    "PAGE_SIZE",
    "PAGE_SLOTS",
    "MAX_COLUMNS",
    "MANAGERS_DIR_NAME",
    "CONTAINER_ID_SIZE",
    "SEGMENT_ID_SIZE",
    "PAGE_ID_SIZE",
    "SLOT_ID_SIZE",
    "CHECKSUM_SIZE",
    "Permissions",
    "TransactionId",
    "StateType",
    "StateMeta",
    "ValueId",
    "ContainerPageId",
    "Lsn",
    "StateInfo",
]

PAGE_SIZE = 4096
"""Page size in bytes."""
PAGE_SLOTS = 50
"""How many pages a buffer pool can hold."""
MAX_COLUMNS = 100
"""Maximum number of columns in a table."""
MANAGERS_DIR_NAME = "managers"
"""Directory name of the manager table."""

CONTAINER_ID_SIZE = 2
SEGMENT_ID_SIZE = 1
PAGE_ID_SIZE = 4
SLOT_ID_SIZE = 2
CHECKSUM_SIZE = 2

_FLAG_BASE = 0b00001000
_FLAG_SEGMENT = 0b00000100
_FLAG_PAGE = 0b00000010
_FLAG_SLOT = 0b00000001

_FIXED_VID_LEN = 10


class Permissions(enum.Enum):
    """Lock permissions: shared (read only) or exclusive (read write)."""

    READ_ONLY = "read_only"
    READ_WRITE = "read_write"


_txn_counter = itertools.count(1)
_txn_lock = threading.Lock()


class TransactionId:
    """A transaction id; each new instance draws the next id from a global counter."""

    __slots__ = ("_id",)

    def __init__(self) -> None:
        with _txn_lock:
            self._id = next(_txn_counter)

    @classmethod
    def system(cls) -> "TransactionId":
        """The id reserved for the system, 0."""
        tid = cls.__new__(cls)
        tid._id = 0
        return tid

    def id(self) -> int:
        """Return the numeric transaction id."""
        return self._id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransactionId):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"TransactionId(id={self._id})"


class StateType(enum.Enum):
    """The things that can be saved and maintained in the database."""

    HASH_TABLE = "HashTable"
    BASE_TABLE = "BaseTable"
    MAT_VIEW = "MatView"
    TREE = "Tree"


@dataclass
class StateMeta:
    """Metadata tracking the state of a container."""

    state_type: StateType
    id: int
    name: Optional[str] = None
    last_update: Optional[int] = None
    dependencies: Optional[List[int]] = None


@dataclass(frozen=True)
class ValueId:
    """Locates a record's bytes in a storage manager."""

    container_id: int
    segment_id: Optional[int] = None
    page_id: Optional[int] = None
    slot_id: Optional[int] = None

    CP_BYTES = CONTAINER_ID_SIZE + PAGE_ID_SIZE + 1

    @classmethod
    def for_page(cls, container_id: int, page_id: int) -> "ValueId":
        """A value id naming a page of a container."""
        return cls(container_id, page_id=page_id)

    @classmethod
    def for_slot(cls, container_id: int, page_id: int, slot_id: int) -> "ValueId":
        """A value id naming a slot on a page of a container."""
        return cls(container_id, page_id=page_id, slot_id=slot_id)

    def to_fixed_bytes(self) -> bytes:
        """Encode into exactly ten bytes; segment ids are not supported."""
        if self.segment_id is not None:
            raise ValueError("segment ids are not supported in fixed-size encoding")
        out = bytearray(_FIXED_VID_LEN)
        flag = _FLAG_BASE
        struct.pack_into("<H", out, 1, self.container_id)
        offset = 1 + CONTAINER_ID_SIZE
        if self.page_id is not None:
            flag |= _FLAG_PAGE
            struct.pack_into("<I", out, offset, self.page_id)
            offset += PAGE_ID_SIZE
        if self.slot_id is not None:
            flag |= _FLAG_SLOT
            struct.pack_into("<H", out, offset, self.slot_id)
        out[0] = flag
        return bytes(out)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ValueId":
        """Decode a value id written by to_bytes, to_fixed_bytes or to_cp_bytes."""
        try:
            flag = data[0]
            (container_id,) = struct.unpack_from("<H", data, 1)
            offset = 1 + CONTAINER_ID_SIZE
            segment_id = page_id = slot_id = None
            if flag & _FLAG_SEGMENT:
                segment_id = data[offset]
                offset += SEGMENT_ID_SIZE
            if flag & _FLAG_PAGE:
                (page_id,) = struct.unpack_from("<I", data, offset)
                offset += PAGE_ID_SIZE
            if flag & _FLAG_SLOT:
                (slot_id,) = struct.unpack_from("<H", data, offset)
        except (IndexError, struct.error) as exc:
            raise ValueError("value id bytes are truncated") from exc
        return cls(container_id, segment_id, page_id, slot_id)

    def to_cp_bytes(self) -> bytes:
        """Encode only the container and page, always CP_BYTES long."""
        flag = _FLAG_BASE | (_FLAG_PAGE if self.page_id is not None else 0)
        page_id = self.page_id if self.page_id is not None else 0
        return struct.pack("<BHI", flag, self.container_id, page_id)

    def to_bytes(self) -> bytes:
        """Encode into a variable-length form holding only the present parts."""
        flag = _FLAG_BASE
        if self.segment_id is not None:
            flag |= _FLAG_SEGMENT
        if self.page_id is not None:
            flag |= _FLAG_PAGE
        if self.slot_id is not None:
            flag |= _FLAG_SLOT
        out = bytearray(struct.pack("<BH", flag, self.container_id))
        if self.segment_id is not None:
            out += struct.pack("<B", self.segment_id)
        if self.page_id is not None:
            out += struct.pack("<I", self.page_id)
        if self.slot_id is not None:
            out += struct.pack("<H", self.slot_id)
        return bytes(out)

    def __repr__(self) -> str:
        parts = [f"c_id:{self.container_id}"]
        if self.segment_id is not None:
            parts.append(f"seg_id:{self.segment_id}")
        if self.page_id is not None:
            parts.append(f"p_id:{self.page_id}")
        if self.slot_id is not None:
            parts.append(f"slot_id:{self.slot_id}")
        return "<" + ",".join(parts) + ">"


@dataclass(frozen=True)
class ContainerPageId:
    """Names a specific page in a container."""

    c_id: int
    page_id: int

    def __str__(self) -> str:
        return f"({self.c_id}, p:{self.page_id})"


@dataclass(frozen=True, order=True)
class Lsn:
    """Log sequence number: the page and slot of a log record."""

    page_id: int
    slot_id: int

    def __str__(self) -> str:
        return f"Lsn<{self.page_id}.{self.slot_id}>"


@dataclass
class StateInfo:
    """State tracking for caching, reuse and indexing."""

    c_id: int
    incremental: bool
    valid_low: int = field(default=0)
    valid_high: int = field(default=0)