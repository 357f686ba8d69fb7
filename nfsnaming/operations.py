"""Naming-server handlers for client requests that touch a single path."""

from __future__ import annotations

import logging
import socket
import time
from contextlib import suppress
from typing import Iterable, Union

from .cluster import Cluster
from .protocol import NodeKind, Status, StorageInfo, recv_int, send_info, send_int

logger = logging.getLogger(__name__)

# Paths in a listing are sent back to back; the pause lets the client read them apart.
_LIST_GAP = 0.0001


class _Refusal(Exception):
    """A request that is answered with an error status instead of being served."""

    def __init__(self, status: Status) -> None:
        super().__init__(status.name)
        self.status = status


def _as_status(value: int) -> Union[Status, int]:
    try:
        return Status(value)
    except ValueError:
        return value


def _reply(client: socket.socket, status: Union[Status, int]) -> Union[Status, int]:
    send_int(client, status)
    return status


def _live(cluster: Cluster, info: StorageInfo, unregistered: Status) -> StorageInfo:
    """Pick a reachable copy of the server holding a path, or refuse."""
    try:
        target = cluster.live_target(info)
    except LookupError:
        raise _Refusal(unregistered) from None
    if target is None:
        raise _Refusal(Status.SS_DOWN)
    return target


def _ask_storage(cluster: Cluster, target: StorageInfo, message: str) -> Union[Status, int]:
    """Send one command to a storage server and return the status it answers with."""
    with cluster.connect(target) as sock:
        sock.sendall(message.encode())
        return _as_status(recv_int(sock))


def _hand_out(cluster: Cluster, path: str, client: socket.socket) -> Union[Status, int]:
    """Tell the client which storage server to talk to for a file."""
    info = cluster.lookup(path)
    try:
        if info is None:
            raise _Refusal(Status.FILE_NOT_FOUND)
        target = _live(cluster, info, Status.FILE_NOT_FOUND)
    except _Refusal as refusal:
        logger.warning("cannot serve %s: %s", path, refusal.status.name)
        return _reply(client, refusal.status)
    send_int(client, Status.SUCCESS)
    send_info(client, target)
    return Status.SUCCESS


def read_path(cluster, path, client):
    """Answer a read request with the location of a live copy of the file."""
    status = _hand_out(cluster, path, client)
    if status == Status.SUCCESS:
        logger.info("file found for read: %s", path)
    return status


def write_path(cluster, path, client):
    """Answer a write request, then return the status the client reports back."""
    status = _hand_out(cluster, path, client)
    if status != Status.SUCCESS:
        return status
    result = _as_status(recv_int(client))
    if result == Status.SUCCESS:
        logger.info("file written: %s", path)
    return result


def make_dir(cluster, dirname, path, client):
    """Create a directory named `dirname` inside `path` and record it in the tree."""
    info = cluster.lookup(path)
    try:
        if info is None or info.kind == NodeKind.FILE:
            raise _Refusal(Status.INVALID_PATH)
        target = _live(cluster, info, Status.INVALID_PATH)
    except _Refusal as refusal:
        logger.warning("cannot make directory in %s: %s", path, refusal.status.name)
        return _reply(client, refusal.status)

    status = _ask_storage(cluster, target, f"makedir {dirname} {path}")
    if status == Status.SUCCESS:
        cluster.trie.insert(
            f"{path}/{dirname}",
            1,
            info.ss_ip,
            info.ss_port,
            info.client_port,
            info.s2s_port,
            NodeKind.DIR,
        )
        logger.info("directory created: %s/%s", path, dirname)
    else:
        logger.error("storage server failed to create %s/%s", path, dirname)
    return _reply(client, status)


def _delete(cluster, path, client, command, missing):
    info = cluster.lookup(path)
    if info is None:
        logger.warning("cannot %s %s: not found", command, path)
        return _reply(client, missing)
    status = _ask_storage(cluster, info, f"{command} {path}")
    if status == Status.SUCCESS:
        with suppress(KeyError):
            cluster.trie.delete(path)
        logger.info("%s succeeded for %s", command, path)
    else:
        logger.error("%s failed for %s", command, path)
    return _reply(client, status)


def delete_file(cluster, path, client):
    """Delete a file on its storage server and drop it from the tree."""
    return _delete(cluster, path, client, "deletefile", Status.FILE_NOT_FOUND)


def delete_dir(cluster, path, client):
    """Delete a directory on its storage server and drop it from the tree."""
    return _delete(cluster, path, client, "deletedir", Status.DIR_NOT_FOUND)


def info(cluster, client, path):
    """Send the client the record of where a path lives.

    When the path is unknown the client is told so and its connection closed.
    """
    found = cluster.trie.search(path)
    if found is None:
        send_int(client, Status.FILE_NOT_FOUND)
        client.close()
        return Status.FILE_NOT_FOUND
    send_int(client, Status.SUCCESS)
    send_info(client, found)
    return Status.SUCCESS


def list_paths(client, paths: Iterable[str]) -> int:
    """Send the count of paths, then each path, then close the connection."""
    items = list(paths)
    send_int(client, len(items))
    time.sleep(_LIST_GAP)
    for path in items:
        client.sendall(path.encode())
        time.sleep(_LIST_GAP)
    client.close()
    return len(items)