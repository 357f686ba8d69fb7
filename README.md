# nfsnaming

This package is the core of the naming server for a small network file
system. It records which storage server holds each path and answers
client lookups. It also passes file and directory operations to the
storage server that owns the path. If that server is marked as failed,
the request goes to one of the server's two replicas.

## Modules

- `nfsnaming.protocol`: the binary wire format.
  - `Status` holds the status codes. `NodeKind` is `FILE` or `DIR`.
  - `StorageInfo` is a server's IP, port, client port, s2s port and node
    kind. `StorageInfo.pack()` encodes it as a fixed-size record and
    `unpack_storage_info()` decodes one.
  - `send_int`, `recv_int`, `send_info` and `recv_info` send and receive
    32-bit integers and records over a socket.
- `nfsnaming.trie`: `PathTrie` and `TreeNode`, a tree of slash-separated
  paths rooted at `/`.
  - `insert` adds a path and creates any missing parent directories.
    Inserting a path that already exists updates only its permission, IP
    and port.
  - `search` returns a `StorageInfo`. It returns `None` when the path is
    missing or has no access permission. Parent directories that `insert`
    created have no permission.
  - `delete` removes a path and everything below it. It raises `KeyError`
    if the path is absent.
  - `walk` yields `(path, node)` pairs depth first. `render` returns one
    line per node.
- `nfsnaming.lru`: `LRUCache`, a cache that evicts the least recently used
  entry. It holds five entries by default. It provides `get` (which raises
  `KeyError` on a miss), `put`, `len()` and `in`.
- `nfsnaming.cluster`: the naming server's state.
  - `Cluster` holds the trie, the cache, the registered servers
    (`StorageServerData`), their replicas (`ReplicaInfo`) and the set of
    failed server indices.
  - `lookup` checks the cache before the trie and caches misses too.
  - `server_index` finds a registered server. `live_target` returns a
    record for a live copy. It returns `None` when the server and both
    replicas are down, and raises `LookupError` for an unregistered
    server.
  - `mark_failed` and `mark_alive` change a server's failure state.
    `connect` opens a TCP connection to a server.
- `nfsnaming.operations`: handlers for client requests. Each one sends a
  status to the client socket and returns it.
  - `read_path` and `write_path` send the client the location of a live
    copy. `write_path` then waits for the client's final status.
  - `make_dir`, `delete_file` and `delete_dir` send the command to the
    storage server and update the trie.
  - `info` sends the record for a path. `list_paths` sends a count, then
    each path, and then closes the socket.
- `nfsnaming.copyfile` and `nfsnaming.copydir`: `copy_file` and
  `copy_dir`.
  - When both paths live on the same server, the copy runs there as a
    single command.
  - Otherwise the copy runs as a transfer between the two servers.
  - On success the new path is added to the trie.
- `nfsnaming.backup`: `backup_dir` and `backup_file` tell one server to
  copy a path to another server. Both return the two servers' statuses.
  They take an optional `connect` callable. `parent_prefix` returns a path
  up to and including its last slash.

## Example

```python
from nfsnaming.trie import PathTrie
from nfsnaming.protocol import NodeKind

trie = PathTrie()
trie.insert("/home/docs", 1, "127.0.0.1", 5000, 5001, 5002, NodeKind.DIR)
info = trie.search("/home/docs")
print(info.ss_ip, info.ss_port)
print(trie.render())
```

## What it does not do

- There is no server process and no command. Nothing listens for clients
  or reads their request lines. You call the handlers with a `Cluster`
  and an already connected client socket.
- Storage servers do not register themselves. The caller fills in
  `Cluster.servers` and `Cluster.replicas` and marks failures itself.
- The package does not include a storage server or a client.

## Installation

```
pip install .
pip install .[test]
pytest
```