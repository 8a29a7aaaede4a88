"""RabbitMQ adapter (optional extra: delayed-exchange-scheduler[rabbitmq])."""

from __future__ import annotations

from .connection import RabbitMQConnectionManager
from .factory import create_rabbitmq_scheduler
from .publisher import RabbitMQRawPublisher
from .topology import RabbitMQTopologyDeclarator

__all__ = [
    "RabbitMQConnectionManager",
    "RabbitMQRawPublisher",
    "RabbitMQTopologyDeclarator",
    "create_rabbitmq_scheduler",
]
