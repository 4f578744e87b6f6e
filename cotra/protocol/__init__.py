"""
COTRA - Protocol Module

Identity types, the central authority, the device contact log and
authority-side exposure tracing.
"""

from .identity import HashedIdentity, Identity, ShareIdentity, UniqueIdentity
from .authority import Authority
from .contact_log import ContactLog
from .exposure import ExposureReport, ExposureStatus, resolve_status, trace_exposures

__all__ = [
    'HashedIdentity',
    'Identity',
    'ShareIdentity',
    'UniqueIdentity',
    'Authority',
    'ContactLog',
    'ExposureReport',
    'ExposureStatus',
    'resolve_status',
    'trace_exposures'
]
