"""Wire formats shared by the naming server, storage servers and clients."""

from __future__ import annotations

import socket
import struct
from dataclasses import dataclass
from enum import IntEnum

IP_FIELD_SIZE = 50

_INT = struct.Struct("<i")
# char ss_ip[50], two bytes of alignment padding, then four ints.
_INFO = struct.Struct("<50s2x4i")


class Status(IntEnum):
    """Status codes exchanged between the servers and the client."""

    SUCCESS = 0
    FILE_NOT_FOUND = 1
    DIR_NOT_FOUND = 2
    INVALID_PATH = 3
    SS_DOWN = 4
    SRC_NOT_FOUND = 5
    SRC_IS_FILE = 6
    SRC_IS_DIR = 7
    DEST_NOT_FOUND = 8
    DEST_IS_FILE = 9
    COPY_ERROR = 10


class NodeKind(IntEnum):
    """Whether a path names a file or a directory."""

    FILE = 0
    DIR = 1


@dataclass
class StorageInfo:
    """Where a path lives: the storage server's address and ports."""

    ss_ip: str
    ss_port: int
    client_port: int = 0
    s2s_port: int = 0
    kind: int = -1

    def pack(self) -> bytes:
        """Encode as the fixed-size record sent over the wire."""
        raw_ip = self.ss_ip.encode("ascii")
        if len(raw_ip) >= IP_FIELD_SIZE:
            raise ValueError(f"IP address too long: {self.ss_ip!r}")
        return _INFO.pack(
            raw_ip, self.ss_port, self.client_port, self.s2s_port, int(self.kind)
        )


def unpack_storage_info(data: bytes) -> StorageInfo:
    """Decode a record produced by StorageInfo.pack."""
    if len(data) != _INFO.size:
        raise ValueError(f"expected {_INFO.size} bytes, got {len(data)}")
    raw_ip, ss_port, client_port, s2s_port, kind = _INFO.unpack(data)
    ip = raw_ip.split(b"\0", 1)[0].decode("ascii")
    try:
        kind = NodeKind(kind)
    except ValueError:
        pass
    return StorageInfo(ip, ss_port, client_port, s2s_port, kind)


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    chunks = bytearray()
    while len(chunks) < size:
        chunk = sock.recv(size - len(chunks))
        if not chunk:
            raise ConnectionError("connection closed before a full message arrived")
        chunks.extend(chunk)
    return bytes(chunks)


def send_int(sock: socket.socket, value: int) -> None:
    """Send one 32-bit signed integer."""
    sock.sendall(_INT.pack(int(value)))


def recv_int(sock: socket.socket) -> int:
    """Receive one 32-bit signed integer."""
    return _INT.unpack(_recv_exact(sock, _INT.size))[0]


def send_info(sock: socket.socket, info: StorageInfo) -> None:
    """Send a storage-server record."""
    sock.sendall(info.pack())


def recv_info(sock: socket.socket) -> StorageInfo:
    """Receive a storage-server record."""
    return unpack_storage_info(_recv_exact(sock, _INFO.size))