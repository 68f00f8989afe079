"""
eventflow_services -- Package init and public API.

Responsibility:
    Composition of the kernel workflows into the ``WorkflowEngine`` facade.

Architecture position:
    Services -- orchestration over kernel + config.

        eventflow_services/ -> eventflow_kernel/  (allowed)
        eventflow_services/ -> eventflow_config/  (allowed)
        eventflow_kernel/   -> eventflow_services/ (FORBIDDEN)
"""

from eventflow_services.workflow_engine import WorkflowEngine

__all__ = ["WorkflowEngine"]
