import socket

import pytest

from nfsnaming.protocol import (
    NodeKind,
    Status,
    StorageInfo,
    recv_info,
    recv_int,
    send_info,
    send_int,
    unpack_storage_info,
)


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


@pytest.mark.parametrize("kind, raw", [(NodeKind.DIR, 1), (NodeKind.FILE, 0)])
def test_node_kind_travels_as_source_value(kind, raw):
    packed = StorageInfo("127.0.0.1", 5000, 6000, 7000, kind).pack()
    assert unpack_storage_info(packed) == StorageInfo("127.0.0.1", 5000, 6000, 7000, raw)


def test_pack_has_fixed_size():
    short = StorageInfo("1.2.3.4", 1).pack()
    long = StorageInfo("192.168.100.200", 65000, 2, 3, NodeKind.DIR).pack()
    assert len(short) == len(long) == 68


def test_pack_starts_with_ip():
    data = StorageInfo("127.0.0.1", 5000).pack()
    assert data.startswith(b"127.0.0.1\0")


def test_pack_unpack_round_trip():
    info = StorageInfo("127.0.0.1", 5000, 6000, 7000, NodeKind.FILE)
    assert unpack_storage_info(info.pack()) == info


def test_round_trip_negative_port():
    info = StorageInfo("", -1, 0, 0, -1)
    assert unpack_storage_info(info.pack()) == info


def test_unpack_wrong_length():
    with pytest.raises(ValueError):
        unpack_storage_info(b"\0" * 10)


def test_pack_rejects_long_ip():
    with pytest.raises(ValueError):
        StorageInfo("x" * 60, 1).pack()


def test_int_round_trip(pair):
    a, b = pair
    send_int(a, Status.SS_DOWN)
    send_int(a, -5)
    assert recv_int(b) == Status.SS_DOWN
    assert recv_int(b) == -5


def test_info_round_trip(pair):
    a, b = pair
    info = StorageInfo("10.0.0.1", 8080, 8081, 8082, NodeKind.DIR)
    send_info(a, info)
    assert recv_info(b) == info


def test_recv_int_closed_connection(pair):
    a, b = pair
    a.sendall(b"\x01\x02")
    a.close()
    with pytest.raises(ConnectionError):
        recv_int(b)