"""Ports consumed and provided by the delayed-exchange scheduler."""

from __future__ import annotations

from .conventions import IDeliveryModeStrategy, INamingConventions
from .scheduling import IScheduler
from .topology import IRawPublisher, ITopologyDeclarator

__all__ = [
    "IDeliveryModeStrategy",
    "INamingConventions",
    "IRawPublisher",
    "IScheduler",
    "ITopologyDeclarator",
]
