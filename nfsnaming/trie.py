"""Directory tree mapping paths to the storage servers that hold them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from .protocol import NodeKind, StorageInfo


@dataclass
class TreeNode:
    """One path component in the tree."""

    name: str
    kind: int = NodeKind.DIR
    access_permission: int = 0
    ss_ip: Optional[str] = None
    ss_port: int = 0
    client_port: int = 0
    s2s_port: int = 0
    children: dict[str, "TreeNode"] = field(default_factory=dict)


def _split(path: str) -> tuple[list[str], str]:
    """Split a path into its parent components and its last component."""
    depth = path.count("/")
    parts = [part for part in path.split("/") if part]
    if depth == 0 or depth > len(parts):
        raise ValueError(f"malformed path: {path!r}")
    return parts[: depth - 1], parts[depth - 1]


class PathTrie:
    """Tree of paths rooted at "/"."""

    def __init__(self) -> None:
        self.root = TreeNode("/")

    def _parent(self, parents: list[str]) -> Optional[TreeNode]:
        node = self.root
        for name in parents:
            node = node.children.get(name)
            if node is None:
                return None
        return node

    def insert(self, path, access_permission, ip, port, client_port, s2s_port, kind):
        """Add a path, creating missing parent directories.

        Re-inserting an existing path updates only its permission, IP and port.
        """
        parents, leaf = _split(path)
        node = self.root
        for name in parents:
            child = node.children.get(name)
            if child is None:
                child = node.children[name] = TreeNode(name)
            node = child
        existing = node.children.get(leaf)
        if existing is None:
            node.children[leaf] = TreeNode(
                leaf, kind, access_permission, ip, port, client_port, s2s_port
            )
        else:
            existing.access_permission = access_permission
            existing.ss_port = port
            existing.ss_ip = ip

    def search(self, path) -> Optional[StorageInfo]:
        """Return where the path lives, or None if absent or not accessible."""
        parents, leaf = _split(path)
        parent = self._parent(parents)
        if parent is None:
            return None
        node = parent.children.get(leaf)
        if node is None or not node.access_permission:
            return None
        return StorageInfo(
            node.ss_ip or "", node.ss_port, node.client_port, node.s2s_port, node.kind
        )

    def delete(self, path) -> None:
        """Remove a path and everything below it."""
        parents, leaf = _split(path)
        parent = self._parent(parents)
        if parent is None or leaf not in parent.children:
            raise KeyError(path)
        del parent.children[leaf]

    def walk(self) -> Iterator[tuple[str, TreeNode]]:
        """Yield (path, node) for every node, root first, depth first."""
        stack = [("/", self.root)]
        while stack:
            path, node = stack.pop()
            yield path, node
            base = path.rstrip("/")
            stack.extend(
                reversed([(f"{base}/{name}", child) for name, child in node.children.items()])
            )

    def render(self) -> str:
        """Describe every node on its own line."""
        return "\n".join(
            f"{node.name} Port {node.ss_port} ip "
            f"{node.ss_ip if node.ss_ip is not None else '(null)'}"
            for _, node in self.walk()
        )