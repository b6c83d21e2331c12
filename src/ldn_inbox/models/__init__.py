"""SQLAlchemy tables for the LDN inbox collections"""

from .base import PortableJSONB, epoch_millis
from .collections import Collections, RecordStatus, define_collections

__all__ = [
    "PortableJSONB",
    "epoch_millis",
    "Collections",
    "RecordStatus",
    "define_collections",
]
