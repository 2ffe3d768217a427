"""
===============================================================================
APPLICATION USE CASES (Public API / Exports)
===============================================================================

Subpaquetes:
  - tasks: ciclo de vida de tareas con policy de acceso
  - users: gestión de cuentas
===============================================================================
"""
