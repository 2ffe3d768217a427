"""
===============================================================================
INFRASTRUCTURE LAYER
===============================================================================

Adaptadores concretos de los puertos del dominio:
  - db: pool de conexiones PostgreSQL
  - repositories: implementaciones Postgres e in-memory
===============================================================================
"""
