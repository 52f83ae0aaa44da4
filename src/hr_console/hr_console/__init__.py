"""HR Console package.

Organized by feature modules (users, leaves, audit, ...) with a thin Flask
controller layer on top of service/repository layers. The leave-approval
workflow engine lives in ``leaves.workflow``.
"""
