"""
Name: Backend ASGI Entrypoint (task_manager.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers and tooling
  - Keep this module side-effect free beyond importing task_manager.api.main

Notes/Constraints:
  - No configuration or IO should live here
  - uvicorn task_manager.main:app
"""

from task_manager.api.main import app

__all__ = ["app"]
