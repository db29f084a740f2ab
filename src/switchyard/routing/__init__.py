"""Routing — canonical paths, a segment trie, and route entries.

Patterns are canonicalized once at registration; request paths are
canonicalized per request and matched in O(path-depth).
"""
