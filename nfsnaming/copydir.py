"""Naming-server handler for copying a directory into another directory."""

from __future__ import annotations

import logging
import socket
import time
from contextlib import ExitStack
from typing import Union

from .cluster import Cluster
from .protocol import NodeKind, Status, StorageInfo, recv_int, send_info, send_int

logger = logging.getLogger(__name__)

# The command text and the record that follows it are sent apart.
_GAP = 0.001


class _Refusal(Exception):
    """A copy request answered with an error status."""

    def __init__(self, status: Status) -> None:
        super().__init__(status.name)
        self.status = status


def _as_status(value: int) -> Union[Status, int]:
    try:
        return Status(value)
    except ValueError:
        return value


def _live(cluster: Cluster, info: StorageInfo) -> StorageInfo:
    try:
        target = cluster.live_target(info)
    except LookupError:
        raise _Refusal(Status.INVALID_PATH) from None
    if target is None:
        raise _Refusal(Status.SS_DOWN)
    return target


def _resolve(
    cluster: Cluster, path: str, missing: Status, is_file: Status
) -> tuple[StorageInfo, StorageInfo]:
    """Return the recorded owner of a directory and a live copy of it."""
    info = cluster.lookup(path)
    if info is None:
        raise _Refusal(missing)
    if info.kind == NodeKind.FILE:
        raise _Refusal(is_file)
    return info, _live(cluster, info)


def _copy_within(cluster: Cluster, target: StorageInfo, src: str, dest: str):
    with cluster.connect(target) as sock:
        sock.sendall(f"copydir same {src} {dest}".encode())
        return _as_status(recv_int(sock))


def _copy_across(
    cluster: Cluster, src_target: StorageInfo, dest_target: StorageInfo, src: str, dest: str
):
    with ExitStack() as stack:
        source = stack.enter_context(cluster.connect(src_target))
        source.sendall(f"copydir src {src}".encode())
        time.sleep(_GAP)
        send_info(source, dest_target)

        target = stack.enter_context(cluster.connect(dest_target))
        target.sendall(f"copydir dest {dest}".encode())
        time.sleep(_GAP)
        send_info(target, src_target)

        return _as_status(recv_int(source)), _as_status(recv_int(target))


def copy_dir(cluster, src, dest, client: socket.socket):
    """Copy the directory `src` into the directory `dest` and tell the client how it went."""
    try:
        src_info, src_target = _resolve(cluster, src, Status.SRC_NOT_FOUND, Status.SRC_IS_FILE)
        dest_info, dest_target = _resolve(
            cluster, dest, Status.DEST_NOT_FOUND, Status.DEST_IS_FILE
        )
    except _Refusal as refusal:
        logger.warning("cannot copy directory %s to %s: %s", src, dest, refusal.status.name)
        send_int(client, refusal.status)
        return refusal.status

    new_path = dest + src[src.rfind("/"):]
    same_server = (
        src_target.s2s_port == dest_target.s2s_port and src_target.ss_ip == dest_target.ss_ip
    )
    if same_server:
        ok = _copy_within(cluster, src_target, src, dest) == Status.SUCCESS
        owner = src_info
    else:
        statuses = _copy_across(cluster, src_target, dest_target, src, dest)
        ok = all(status == Status.SUCCESS for status in statuses)
        owner = dest_info

    if not ok:
        logger.error("copy of directory %s to %s failed", src, dest)
        send_int(client, Status.COPY_ERROR)
        return Status.COPY_ERROR

    send_int(client, Status.SUCCESS)
    cluster.trie.insert(
        new_path, 1, owner.ss_ip, owner.ss_port, owner.client_port, owner.s2s_port, NodeKind.DIR
    )
    logger.info("directory copied: %s -> %s", src, new_path)
    return Status.SUCCESS