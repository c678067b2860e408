"""
Toolkit playground backend.

Selected toolkits are resolved into namespaced tools for a tool-calling
language-model agent. See toolkits/ for the registry and agent/ for dispatch.
"""
