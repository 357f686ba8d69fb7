import struct

import pytest

from nfsnaming.backup import backup_dir, backup_file, parent_prefix
from nfsnaming.protocol import NodeKind, Status, StorageInfo


class FakeSocket:
    def __init__(self, status):
        self.sent = bytearray()
        self._reply = struct.pack("<i", status)
        self.closed = False

    def sendall(self, data):
        self.sent.extend(data)

    def recv(self, size):
        chunk, self._reply = self._reply[:size], self._reply[size:]
        return chunk

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False


SENDER = StorageInfo("127.0.0.1", 5001, 6001, 7001, NodeKind.DIR)
RECEIVER = StorageInfo("127.0.0.2", 5002, 6002, 7002, NodeKind.DIR)


def make_connector(statuses):
    sockets = {port: FakeSocket(status) for port, status in statuses.items()}
    calls = []

    def connect(info):
        calls.append(info)
        return sockets[info.ss_port]

    return connect, sockets, calls


def test_parent_prefix_keeps_trailing_slash():
    assert parent_prefix("/a/b") == "/a/"


def test_parent_prefix_of_top_level_path_is_root():
    assert parent_prefix("/b") == "/"


def test_parent_prefix_without_slash_raises():
    with pytest.raises(ValueError):
        parent_prefix("plain")


def test_backup_dir_sends_commands_and_records():
    connect, sockets, calls = make_connector(
        {SENDER.ss_port: Status.SUCCESS, RECEIVER.ss_port: Status.SUCCESS}
    )
    result = backup_dir(SENDER, RECEIVER, "/a/b", connect)
    assert result == (Status.SUCCESS, Status.SUCCESS)
    assert calls == [SENDER, RECEIVER]
    assert bytes(sockets[SENDER.ss_port].sent) == b"copydir src /a/b" + RECEIVER.pack()
    assert bytes(sockets[RECEIVER.ss_port].sent) == b"copydir dest /a/" + SENDER.pack()


def test_backup_file_sends_commands_and_records():
    connect, sockets, calls = make_connector(
        {SENDER.ss_port: Status.SUCCESS, RECEIVER.ss_port: Status.COPY_ERROR}
    )
    result = backup_file(SENDER, RECEIVER, "/x/y/z.txt", connect)
    assert result == (Status.SUCCESS, Status.COPY_ERROR)
    assert bytes(sockets[SENDER.ss_port].sent) == b"copyfile src /x/y/z.txt" + RECEIVER.pack()
    assert bytes(sockets[RECEIVER.ss_port].sent) == b"copyfile dest /x/y/" + SENDER.pack()


def test_backup_closes_both_connections():
    connect, sockets, _ = make_connector(
        {SENDER.ss_port: Status.SUCCESS, RECEIVER.ss_port: Status.SUCCESS}
    )
    backup_file(SENDER, RECEIVER, "/f.txt", connect)
    assert all(sock.closed for sock in sockets.values())


def test_unknown_status_is_returned_as_int():
    connect, _, _ = make_connector({SENDER.ss_port: 99, RECEIVER.ss_port: Status.SUCCESS})
    source_status, dest_status = backup_dir(SENDER, RECEIVER, "/d", connect)
    assert source_status == 99
    assert dest_status == Status.SUCCESS


def test_bad_path_fails_before_connecting():
    connect, _, calls = make_connector(
        {SENDER.ss_port: Status.SUCCESS, RECEIVER.ss_port: Status.SUCCESS}
    )
    with pytest.raises(ValueError):
        backup_dir(SENDER, RECEIVER, "noslash", connect)
    assert calls == []