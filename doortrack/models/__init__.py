"""Application models package."""

from doortrack.models.local_record import LocalRecord

__all__ = ["LocalRecord"]
