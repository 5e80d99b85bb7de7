"""
Adapters — thin wrappers over the workspace REST API.

Each call maps to one HTTP request. No business logic: ordering,
absence handling and recursion live in tools/.
"""
