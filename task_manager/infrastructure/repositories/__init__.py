"""
Repository adapters.

- in_memory: dict stores guarded by locks (tests, local development)
- postgres: raw parameterized SQL over the psycopg pool
"""
