"""
Toolkits package.

A toolkit bundles related tools behind one user-facing switch:
- base: shared descriptor (id, name, tool definitions, parameter schema)
- server: prompt fragment plus a factory that binds tools to credentials
- client: per-tool rendering for calls in progress and their results

Toolkits MAY reach third-party APIs, but only from inside tool callbacks.
Resolving a toolkit never executes a tool.
"""
