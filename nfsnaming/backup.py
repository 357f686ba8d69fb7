"""Replication of files and directories from one storage server to another."""

from __future__ import annotations

import socket
import time
from contextlib import ExitStack
from typing import Callable, Optional, Union

from .protocol import Status, StorageInfo, recv_int, send_info

# The command text and the record that follows it are sent apart.
_GAP = 0.001

Connector = Callable[[StorageInfo], socket.socket]


def _default_connect(info: StorageInfo) -> socket.socket:
    return socket.create_connection((info.ss_ip, info.ss_port))


def _as_status(value: int) -> Union[Status, int]:
    try:
        return Status(value)
    except ValueError:
        return value


def parent_prefix(path: str) -> str:
    """Return the path up to and including its last slash."""
    index = path.rfind("/")
    if index < 0:
        raise ValueError(f"path has no directory part: {path!r}")
    return path[: index + 1]


def _replicate(
    command: str,
    sender: StorageInfo,
    receiver: StorageInfo,
    path: str,
    connect: Optional[Connector],
) -> tuple[Union[Status, int], Union[Status, int]]:
    dest_dir = parent_prefix(path)
    opener = connect or _default_connect
    with ExitStack() as stack:
        source = stack.enter_context(opener(sender))
        source.sendall(f"{command} src {path}".encode())
        time.sleep(_GAP)
        send_info(source, receiver)

        target = stack.enter_context(opener(receiver))
        target.sendall(f"{command} dest {dest_dir}".encode())
        time.sleep(_GAP)
        send_info(target, sender)

        return _as_status(recv_int(source)), _as_status(recv_int(target))


def backup_dir(sender, receiver, dir_path, connect=None):
    """Have `sender` copy a directory to `receiver`.

    Returns the statuses reported by the sending and the receiving server.
    """
    return _replicate("copydir", sender, receiver, dir_path, connect)


def backup_file(sender, receiver, file_path, connect=None):
    """Have `sender` copy a file to `receiver`.

    Returns the statuses reported by the sending and the receiving server.
    """
    return _replicate("copyfile", sender, receiver, file_path, connect)