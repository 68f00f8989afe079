"""
EventFlow Kernel

The workflow core of the event approval-tracking tool:
- Event-request approval chain (CS -> SCS -> FM -> AM)
- Task-distribution assignment, feedback, and review per sub-team task
- Role-gated transitions with refusal (``None``) instead of exceptions
- Per-role work-item queries for dashboards
"""

__version__ = "0.1.0"
