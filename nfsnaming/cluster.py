"""Naming-server state: the path tree, lookup cache and storage-server replicas."""

from __future__ import annotations

import socket
from dataclasses import dataclass, field, replace
from typing import Optional

from .lru import LRUCache
from .protocol import StorageInfo
from .trie import PathTrie


@dataclass
class ReplicaInfo:
    """A storage server and the indices of the two servers backing it up."""

    original_ss_ip: str
    original_ss_port: int
    replica1_ss_index: int
    replica2_ss_index: int


@dataclass
class StorageServerData:
    """What a storage server reported when it registered."""

    ip: str
    port_number: int
    s2s_port: int
    client_port: int
    paths: list[str] = field(default_factory=list)


@dataclass
class Cluster:
    """Everything the naming server knows about the storage servers."""

    trie: PathTrie = field(default_factory=PathTrie)
    cache: LRUCache = field(default_factory=LRUCache)
    servers: list[StorageServerData] = field(default_factory=list)
    replicas: list[ReplicaInfo] = field(default_factory=list)
    failed: set[int] = field(default_factory=set)
    timeout: Optional[float] = None

    def lookup(self, path) -> Optional[StorageInfo]:
        """Find where a path lives, consulting the cache first.

        Misses are cached too, so a later lookup returns the same answer.
        """
        try:
            return self.cache.get(path)
        except KeyError:
            result = self.trie.search(path)
            self.cache.put(path, result)
            return result

    def server_index(self, info) -> Optional[int]:
        """Index of the registered server matching the record, or None."""
        for index, replica in enumerate(self.replicas):
            if (
                replica.original_ss_port == info.ss_port
                and replica.original_ss_ip == info.ss_ip
            ):
                return index
        return None

    def live_target(self, info) -> Optional[StorageInfo]:
        """Return a record pointing at a live copy of the server, or None if all are down.

        Raises LookupError if the record's server was never registered.
        """
        index = self.server_index(info)
        if index is None:
            raise LookupError(f"no storage server at {info.ss_ip}:{info.ss_port}")
        if index not in self.failed:
            return info
        replica = self.replicas[index]
        if replica.replica1_ss_index not in self.failed:
            target = replica.replica1_ss_index
        elif replica.replica2_ss_index not in self.failed:
            target = replica.replica2_ss_index
        else:
            return None
        server = self.servers[target]
        return replace(
            info,
            ss_ip=server.ip,
            ss_port=server.port_number,
            s2s_port=server.s2s_port,
            client_port=server.client_port,
        )

    def mark_failed(self, index) -> None:
        self.failed.add(index)

    def mark_alive(self, index) -> None:
        self.failed.discard(index)

    def connect(self, info) -> socket.socket:
        """Open a TCP connection to the storage server in the record."""
        return socket.create_connection((info.ss_ip, info.ss_port), timeout=self.timeout)