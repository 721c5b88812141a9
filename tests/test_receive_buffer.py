import dataclasses

import pytest

from srtcore.packets import DataEncryption, DataPacket, PacketLocation
from srtcore.receive_buffer import RecvBuffer
from srtcore.seq_number import SeqNumber
from srtcore.timing import TimeStamp

START = 1_000_000
LATENCY = 100_000


def basic_pack(**changes):
    base = DataPacket(
        seq_number=SeqNumber.new_truncate(5),
        message_loc=PacketLocation.FIRST,
        in_order_delivery=False,
        encryption=DataEncryption.NONE,
        retransmitted=False,
        message_number=0,
        timestamp=TimeStamp.from_micros(0),
        dest_sockid=4,
        payload=b"",
    )
    return dataclasses.replace(base, **changes)


def new_buffer(head):
    return RecvBuffer(head, START, LATENCY)


def test_not_ready_empty():
    buf = new_buffer(SeqNumber.new_truncate(3))
    assert buf.next_msg_ready() is None
    assert buf.next_msg(START) is None
    assert buf.next_release() == SeqNumber(3)


def test_not_ready_no_more():
    buf = new_buffer(SeqNumber.new_truncate(5))
    buf.add(basic_pack(seq_number=SeqNumber(5), message_loc=PacketLocation.FIRST))
    assert buf.next_msg_ready() is None
    assert buf.next_msg(START) is None
    assert buf.next_release() == SeqNumber(5)


def test_not_ready_none():
    buf = new_buffer(SeqNumber.new_truncate(5))
    buf.add(basic_pack(seq_number=SeqNumber(5), message_loc=PacketLocation.FIRST))
    buf.add(basic_pack(seq_number=SeqNumber(7), message_loc=PacketLocation.FIRST))
    assert buf.next_msg_ready() is None
    assert buf.next_msg(START) is None
    assert buf.next_release() == SeqNumber(5)


def test_not_ready_middle():
    buf = new_buffer(SeqNumber.new_truncate(5))
    buf.add(basic_pack(seq_number=SeqNumber(5), message_loc=PacketLocation.FIRST))
    buf.add(basic_pack(seq_number=SeqNumber(6), message_loc=PacketLocation(0)))
    assert buf.next_msg_ready() is None
    assert buf.next_msg(START) is None
    assert buf.next_release() == SeqNumber(5)


def test_ready_single():
    buf = new_buffer(SeqNumber.new_truncate(5))
    buf.add(basic_pack(seq_number=SeqNumber(5), message_loc=PacketLocation.ONLY, payload=b"hello"))
    buf.add(basic_pack(seq_number=SeqNumber(6), message_loc=PacketLocation(0), payload=b"no"))

    assert buf.next_msg_ready() == 1
    assert buf.next_msg(START) == (buf.remote_clock.origin_time(), b"hello")
    assert buf.next_release() == SeqNumber(6)
    assert len(buf) == 1


def test_ready_multi():
    buf = new_buffer(SeqNumber.new_truncate(5))
    buf.add(basic_pack(seq_number=SeqNumber(5), message_loc=PacketLocation.FIRST, payload=b"hello"))
    buf.add(basic_pack(seq_number=SeqNumber(6), message_loc=PacketLocation(0), payload=b"yas"))
    buf.add(basic_pack(seq_number=SeqNumber(7), message_loc=PacketLocation.LAST, payload=b"nas"))

    assert buf.next_msg_ready() == 3
    assert buf.next_msg(START) == (buf.remote_clock.origin_time(), b"helloyasnas")
    assert buf.next_release() == SeqNumber(8)
    assert len(buf) == 0


def test_late_packet_is_ignored():
    buf = new_buffer(SeqNumber(5))
    buf.add(basic_pack(seq_number=SeqNumber(3), message_loc=PacketLocation.ONLY))
    assert len(buf) == 0
    assert buf.next_release() == SeqNumber(5)


def test_head_not_marked_first_raises():
    buf = new_buffer(SeqNumber(5))
    buf.add(basic_pack(seq_number=SeqNumber(5), message_loc=PacketLocation.LAST))
    with pytest.raises(RuntimeError):
        buf.next_msg_ready()


def test_tsbpd_release_waits_for_latency():
    buf = new_buffer(SeqNumber(5))
    buf.add(basic_pack(seq_number=SeqNumber(5), message_loc=PacketLocation.ONLY, payload=b"x"))

    assert buf.next_msg_ready_tsbpd(START) is None
    assert buf.next_msg_tsbpd(START + LATENCY - 1) is None
    assert buf.next_message_release_time(START) == START + LATENCY
    assert buf.next_msg_ready_tsbpd(START + LATENCY) == 1
    assert buf.next_msg_tsbpd(START + LATENCY) == (START, b"x")
    assert buf.next_release() == SeqNumber(6)


def test_release_time_none_without_message():
    buf = new_buffer(SeqNumber(5))
    assert buf.next_message_release_time(START) is None


def test_drop_too_late_packets():
    buf = new_buffer(SeqNumber(5))
    buf.add(basic_pack(seq_number=SeqNumber(7), message_loc=PacketLocation.ONLY, payload=b"z"))

    assert buf.drop_too_late_packets(START + LATENCY + 1_999) == 0
    assert buf.next_release() == SeqNumber(5)

    assert buf.drop_too_late_packets(START + LATENCY + 2_000) == 2
    assert buf.next_release() == SeqNumber(7)
    assert buf.next_msg_ready() == 1


def test_drop_nothing_when_head_present():
    buf = new_buffer(SeqNumber(5))
    buf.add(basic_pack(seq_number=SeqNumber(5), message_loc=PacketLocation.FIRST))
    assert buf.drop_too_late_packets(START + 10 * LATENCY) == 0
    assert buf.next_release() == SeqNumber(5)


def test_timestamp_from_is_relative_to_start():
    buf = new_buffer(SeqNumber(0))
    assert buf.timestamp_from(START + 1234) == TimeStamp.from_micros(1234)