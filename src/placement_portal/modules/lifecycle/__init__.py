"""
Lifecycle Module

Background reconciler: closes drives past their deadline and purges
expired password-reset codes on a fixed interval.
"""

from .jobs import register_lifecycle_jobs

__all__ = ["register_lifecycle_jobs"]
