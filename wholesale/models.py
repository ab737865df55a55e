"""
Expose ORM models for Django's auto-discovery while keeping real definitions
under the infrastructure module.
"""

from wholesale.infra.models import SessionSnapshotORM, TimeStampedModel

__all__ = ["SessionSnapshotORM", "TimeStampedModel"]
