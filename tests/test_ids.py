import pytest

from heapstore.ids import (
    ContainerPageId,
    Lsn,
    StateInfo,
    StateMeta,
    StateType,
    TransactionId,
    ValueId,
)


def test_vid_tests():
    vid = ValueId(1)
    assert vid.container_id == 1
    assert ValueId.from_bytes(vid.to_bytes()) == vid

    vid = ValueId.for_page(1, 2)
    assert ValueId.from_bytes(vid.to_bytes()) == vid

    vid = ValueId.for_slot(1, 1, 13)
    assert ValueId.from_bytes(vid.to_bytes()) == vid

    vid = ValueId(container_id=1, segment_id=1, page_id=None, slot_id=1)
    assert ValueId.from_bytes(vid.to_bytes()) == vid

    vcp1 = ValueId(3)
    vcp2 = ValueId.for_page(3, 4)
    vcp3 = ValueId.for_slot(3, 4, 0)
    vcp4 = ValueId.for_slot(3, 4, 2)
    vcp5 = ValueId.for_slot(2, 4, 0)
    vcp6 = ValueId.for_page(3, 1)

    assert vcp2.to_cp_bytes() == vcp3.to_cp_bytes()
    assert vcp2.to_cp_bytes() == vcp4.to_cp_bytes()
    assert vcp3.to_cp_bytes() == vcp4.to_cp_bytes()
    assert vcp1.to_cp_bytes() != vcp2.to_cp_bytes()
    assert vcp2.to_cp_bytes() != vcp5.to_cp_bytes()
    assert vcp3.to_cp_bytes() != vcp5.to_cp_bytes()
    assert vcp3.to_cp_bytes() != vcp6.to_cp_bytes()


def test_fixed_vid_tests():
    vid = ValueId(1)
    assert vid.container_id == 1
    assert ValueId.from_bytes(vid.to_fixed_bytes()) == vid

    vid = ValueId.for_page(1, 2)
    assert ValueId.from_bytes(vid.to_fixed_bytes()) == vid

    vid = ValueId.for_slot(1, 1, 13)
    assert ValueId.from_bytes(vid.to_fixed_bytes()) == vid

    vid = ValueId(container_id=1, segment_id=None, page_id=None, slot_id=1)
    assert ValueId.from_bytes(vid.to_fixed_bytes()) == vid


def test_fixed_bytes_length_and_segment_rejected():
    assert len(ValueId.for_slot(7, 8, 9).to_fixed_bytes()) == 10
    assert len(ValueId(7).to_fixed_bytes()) == 10
    with pytest.raises(ValueError):
        ValueId(1, segment_id=2).to_fixed_bytes()


def test_wire_bytes():
    assert ValueId(1).to_bytes() == b"\x08\x01\x00"
    assert ValueId.for_page(1, 2).to_bytes() == b"\x0a\x01\x00\x02\x00\x00\x00"
    assert ValueId.for_slot(1, 1, 13).to_bytes() == (
        b"\x0b\x01\x00\x01\x00\x00\x00\x0d\x00"
    )
    assert ValueId.for_page(3, 4).to_cp_bytes() == b"\x0a\x03\x00\x04\x00\x00\x00"
    assert len(ValueId(3).to_cp_bytes()) == ValueId.CP_BYTES == 7


def test_cp_bytes_round_trip_drops_slot():
    vid = ValueId.for_slot(5, 6, 7)
    assert ValueId.from_bytes(vid.to_cp_bytes()) == ValueId.for_page(5, 6)


def test_from_bytes_truncated():
    with pytest.raises(ValueError):
        ValueId.from_bytes(b"\x0b\x01")
    with pytest.raises(ValueError):
        ValueId.from_bytes(b"")


def test_value_id_repr():
    assert repr(ValueId(1)) == "<c_id:1>"
    assert repr(ValueId(1, segment_id=2, page_id=3, slot_id=4)) == (
        "<c_id:1,seg_id:2,p_id:3,slot_id:4>"
    )


def test_value_id_hashable():
    assert len({ValueId.for_slot(1, 2, 3), ValueId.for_slot(1, 2, 3)}) == 1


def test_transaction_ids_increase():
    first = TransactionId()
    second = TransactionId()
    assert second.id() > first.id() >= 1
    assert first != second
    assert first == first


def test_system_transaction_id():
    assert TransactionId.system().id() == 0
    assert TransactionId.system() == TransactionId.system()


def test_container_page_id_display():
    cp = ContainerPageId(1, 2)
    assert str(cp) == "(1, p:2)"
    assert cp == ContainerPageId(1, 2)


def test_lsn_display_and_order():
    assert str(Lsn(3, 4)) == "Lsn<3.4>"
    assert Lsn(1, 3) < Lsn(3, 4)
    assert Lsn(2, 5) < Lsn(3, 4)
    assert Lsn(1, 2) < Lsn(1, 3)
    assert not Lsn(3, 4) < Lsn(3, 4)


def test_state_info_defaults():
    info = StateInfo(4, True)
    assert info.c_id == 4
    assert info.incremental is True
    assert (info.valid_low, info.valid_high) == (0, 0)


def test_state_meta_defaults():
    meta = StateMeta(StateType.BASE_TABLE, 9)
    assert meta.state_type is StateType.BASE_TABLE
    assert meta.name is None
    assert meta.dependencies is None