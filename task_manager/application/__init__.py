"""
===============================================================================
APPLICATION LAYER
===============================================================================

Orquesta dominio + puertos:
  - usecases.tasks: alta, lectura, listados, actualización, borrado
  - usecases.users: cuentas
  - dev_seed_admin: usuario admin para desarrollo local
===============================================================================
"""
