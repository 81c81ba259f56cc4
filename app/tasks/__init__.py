"""
Celery tasks package.

Tasks are organized by domain:
- report_tasks: Report rendering and scheduled report runs
"""

from app.tasks import report_tasks

__all__ = ["report_tasks"]
