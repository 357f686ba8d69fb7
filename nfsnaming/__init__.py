"""Naming-server core for a small network file system: path trie, lookup cache, replica failover and request handlers."""

__version__ = "0.1.0"