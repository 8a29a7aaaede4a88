"""Unit tests for RabbitMQTopologyDeclarator with mocked connection (no broker)."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import aio_pika
import pytest
from aio_pika.exceptions import AMQPError

from delayed_exchange_scheduler.exceptions import (
    BrokerOperationError,
    DelayedExchangeUnavailableError,
    MessagingConnectionError,
    TopologyConflictError,
)
from delayed_exchange_scheduler.rabbitmq.topology import RabbitMQTopologyDeclarator
from delayed_exchange_scheduler.topology import (
    BindingHandle,
    ExchangeHandle,
    ExchangeType,
    QueueHandle,
    TopologyOptions,
)


@pytest.fixture
def mock_connection() -> MagicMock:
    conn = MagicMock()
    conn.connect = AsyncMock()
    channel = MagicMock()
    channel.declare_exchange = AsyncMock()
    channel.declare_queue = AsyncMock()
    bound_queue = MagicMock()
    bound_queue.bind = AsyncMock()
    bound_exchange = MagicMock()
    bound_exchange.bind = AsyncMock()
    channel.get_queue = AsyncMock(return_value=bound_queue)
    channel.get_exchange = AsyncMock(return_value=bound_exchange)
    conn.channel = channel
    return conn


@pytest.fixture
def declarator(mock_connection: MagicMock) -> RabbitMQTopologyDeclarator:
    return RabbitMQTopologyDeclarator(mock_connection)


@pytest.mark.asyncio
async def test_declare_delayed_exchange_uses_plugin_type(
    declarator: RabbitMQTopologyDeclarator, mock_connection: MagicMock
) -> None:
    handle = await declarator.declare_exchange(
        "OrderPlaced_delayed", ExchangeType.DIRECT, delayed=True
    )
    mock_connection.connect.assert_awaited_once()
    mock_connection.channel.declare_exchange.assert_awaited_once_with(
        "OrderPlaced_delayed",
        aio_pika.ExchangeType.X_DELAYED_MESSAGE,
        durable=True,
        auto_delete=False,
        arguments={"x-delayed-type": "direct"},
    )
    assert handle == ExchangeHandle(
        "OrderPlaced_delayed", ExchangeType.DIRECT, delayed=True
    )


@pytest.mark.asyncio
async def test_declare_topic_exchange(
    declarator: RabbitMQTopologyDeclarator, mock_connection: MagicMock
) -> None:
    await declarator.declare_exchange("OrderPlaced", ExchangeType.TOPIC)
    mock_connection.channel.declare_exchange.assert_awaited_once_with(
        "OrderPlaced",
        aio_pika.ExchangeType.TOPIC,
        durable=True,
        auto_delete=False,
        arguments=None,
    )


@pytest.mark.asyncio
async def test_declare_queue_applies_options(mock_connection: MagicMock) -> None:
    declarator = RabbitMQTopologyDeclarator(
        mock_connection, options=TopologyOptions(durable=False, auto_delete=True)
    )
    handle = await declarator.declare_queue("OrderPlaced")
    mock_connection.channel.declare_queue.assert_awaited_once_with(
        "OrderPlaced", durable=False, auto_delete=True
    )
    assert handle == QueueHandle("OrderPlaced", durable=False, auto_delete=True)


@pytest.mark.asyncio
async def test_bind_exchange_to_exchange(
    declarator: RabbitMQTopologyDeclarator, mock_connection: MagicMock
) -> None:
    source = ExchangeHandle("OrderPlaced_delayed", ExchangeType.DIRECT, delayed=True)
    destination = ExchangeHandle("OrderPlaced", ExchangeType.TOPIC)
    binding = await declarator.bind(source, destination, "#")

    channel = mock_connection.channel
    channel.get_exchange.assert_awaited_once_with("OrderPlaced", ensure=False)
    channel.get_exchange.return_value.bind.assert_awaited_once_with(
        "OrderPlaced_delayed", routing_key="#"
    )
    channel.get_queue.assert_not_called()
    assert binding == BindingHandle(
        "OrderPlaced_delayed", "OrderPlaced", "#", to_queue=False
    )


@pytest.mark.asyncio
async def test_bind_exchange_to_queue(
    declarator: RabbitMQTopologyDeclarator, mock_connection: MagicMock
) -> None:
    source = ExchangeHandle("OrderPlaced", ExchangeType.TOPIC)
    binding = await declarator.bind(source, QueueHandle("OrderPlaced"), "#")

    channel = mock_connection.channel
    channel.get_queue.assert_awaited_once_with("OrderPlaced", ensure=False)
    channel.get_queue.return_value.bind.assert_awaited_once_with(
        "OrderPlaced", routing_key="#"
    )
    assert binding.to_queue is True


@pytest.mark.asyncio
async def test_missing_plugin_is_reported(
    declarator: RabbitMQTopologyDeclarator, mock_connection: MagicMock
) -> None:
    frame = SimpleNamespace(
        reply_code=503,
        reply_text="COMMAND_INVALID - invalid exchange type 'x-delayed-message'",
    )
    mock_connection.channel.declare_exchange.side_effect = AMQPError(frame)

    with pytest.raises(DelayedExchangeUnavailableError) as exc_info:
        await declarator.declare_exchange(
            "OrderPlaced_delayed", ExchangeType.DIRECT, delayed=True
        )
    assert "rabbitmq_delayed_message_exchange" in str(exc_info.value)
    assert exc_info.value.target == "OrderPlaced_delayed"
    assert isinstance(exc_info.value.__cause__, AMQPError)


@pytest.mark.asyncio
async def test_inequivalent_declaration_is_a_conflict(
    declarator: RabbitMQTopologyDeclarator, mock_connection: MagicMock
) -> None:
    frame = SimpleNamespace(
        reply_code=406,
        reply_text=(
            "PRECONDITION_FAILED - inequivalent arg 'type' for exchange "
            "'OrderPlaced' in vhost '/': received 'topic' but current is 'fanout'"
        ),
    )
    mock_connection.channel.declare_exchange.side_effect = AMQPError(frame)
    with pytest.raises(TopologyConflictError, match="inequivalent"):
        await declarator.declare_exchange("OrderPlaced", ExchangeType.TOPIC)


@pytest.mark.asyncio
async def test_connection_loss_during_bind(
    declarator: RabbitMQTopologyDeclarator, mock_connection: MagicMock
) -> None:
    mock_connection.channel.get_queue.return_value.bind.side_effect = (
        ConnectionResetError("reset by peer")
    )
    source = ExchangeHandle("OrderPlaced", ExchangeType.TOPIC)
    with pytest.raises(MessagingConnectionError) as exc_info:
        await declarator.bind(source, QueueHandle("OrderPlaced"), "#")
    assert exc_info.value.operation == "bind"
    assert exc_info.value.target == "OrderPlaced->OrderPlaced"


@pytest.mark.asyncio
async def test_other_amqp_errors_are_broker_errors(
    declarator: RabbitMQTopologyDeclarator, mock_connection: MagicMock
) -> None:
    mock_connection.channel.declare_queue.side_effect = AMQPError("access refused")
    with pytest.raises(BrokerOperationError, match="access refused"):
        await declarator.declare_queue("OrderPlaced")
