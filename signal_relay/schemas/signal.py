"""
Signal-related Pydantic schemas for the Signal Relay webhook.

Handles validation of the inbound alert body and serialization of the
requests forwarded to the Trade and Notification services. Wire names are
camelCase; attributes are snake_case.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

Number = Union[int, float]
ChatId = Union[int, str]

MISSING_FIELD_TEXT = "N/A"

_NUMBER_ADAPTER = TypeAdapter(Number)


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """Serialize with camelCase keys, dropping unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class NotifySpec(CamelModel):
    """
    Notification options attached to an inbound signal.

    Attributes:
        chat_id: Target chat for the Notification Service.
        message: Optional message text; a trade summary is used when absent.
    """

    chat_id: ChatId
    message: Optional[str] = None


class TradeOrder(CamelModel):
    """
    A complete trade payload: every field the Trade Service needs is present.

    Attributes:
        exchange: Exchange identifier (e.g. 'mexc')
        action: Trade action (e.g. 'LONG', 'SHORT', 'CLOSE')
        symbol: Instrument symbol (e.g. 'BTC_USDT')
        quantity: Order size
        price: Optional limit/reference price
        leverage: Optional leverage multiplier
    """

    exchange: str
    action: str
    symbol: str
    quantity: Number
    price: Optional[Number] = None
    leverage: Optional[Number] = None


class TradeRequest(TradeOrder):
    """Trade order as sent to the Trade Service, tagged with the correlation id."""

    request_id: str


class NotificationRequest(CamelModel):
    """Body sent to the Notification Service."""

    request_id: str
    message: str
    chat_id: ChatId


def _optional_number(value: Any) -> Optional[Number]:
    """Return value as a number, or None when it is absent or not numeric."""
    if value is None:
        return None
    try:
        return _NUMBER_ADAPTER.validate_python(value)
    except ValidationError:
        return None


def _format_value(value: Any) -> str:
    """Render a template value; integral floats print without a trailing .0."""
    if value is None:
        return MISSING_FIELD_TEXT
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class InboundSignal(CamelModel):
    """
    Raw view of an authenticated inbound webhook body.

    The `apiKey` field is stripped before this model is built, so it is never
    part of it. Fields are kept as received; each branch validates only the
    fields it uses, so a malformed `notify` never blocks a complete trade and
    vice versa. Unknown fields are ignored.

    Attributes:
        exchange, action, symbol, quantity: Trade fields
        price: Optional reference price
        leverage: Optional leverage multiplier
        notify: Optional notification options
    """

    exchange: Any = None
    action: Any = None
    symbol: Any = None
    quantity: Any = None
    price: Any = None
    leverage: Any = None
    notify: Any = None

    def missing_trade_fields(self) -> list[str]:
        """Return the trade fields that are absent or empty."""
        return [
            name for name in ("exchange", "action", "symbol", "quantity")
            if not getattr(self, name)
        ]

    def _validate_trade(self) -> tuple[Optional[TradeOrder], list[str]]:
        if self.missing_trade_fields():
            return None, []
        try:
            order = TradeOrder(
                exchange=self.exchange,
                action=self.action,
                symbol=self.symbol,
                quantity=self.quantity,
                price=_optional_number(self.price),
                leverage=_optional_number(self.leverage),
            )
        except ValidationError as e:
            return None, sorted({str(err["loc"][0]) for err in e.errors()})
        return order, []

    def trade_order(self) -> Optional[TradeOrder]:
        """
        Classify the signal as a complete trade payload or no trade at all.

        A `price` or `leverage` that is not numeric is dropped rather than
        blocking the trade.

        Returns:
            TradeOrder when exchange, action, symbol and quantity are all
            truthy and well-typed, otherwise None.
        """
        order, _ = self._validate_trade()
        return order

    def invalid_trade_fields(self) -> list[str]:
        """Return the required trade fields that are present but malformed."""
        _, invalid = self._validate_trade()
        return invalid

    def notify_spec(self) -> Optional[NotifySpec]:
        """Return the notification options, or None when absent or malformed."""
        if self.notify is None:
            return None
        try:
            return NotifySpec.model_validate(self.notify)
        except ValidationError:
            return None

    def trade_request(self, request_id: str) -> Optional[TradeRequest]:
        """Build the Trade Service body, or None when the trade branch is skipped."""
        order = self.trade_order()
        if order is None:
            return None
        return TradeRequest(request_id=request_id, **order.model_dump())

    def notification_request(self, request_id: str) -> Optional[NotificationRequest]:
        """Build the Notification Service body, or None when the branch is skipped."""
        notify = self.notify_spec()
        if notify is None:
            return None
        return NotificationRequest(
            request_id=request_id,
            message=notify.message or self.default_message(),
            chat_id=notify.chat_id,
        )

    def default_message(self) -> str:
        """
        Render the summary used when the caller did not supply a message.

        Example:
            📊 Trade Alert: LONG BTC_USDT
            📈 Exchange: mexc
            💰 Quantity: 0.1
            💵 Price: 50000
        """
        message = f"📊 Trade Alert: {_format_value(self.action)} {_format_value(self.symbol)}\n"
        message += f"📈 Exchange: {_format_value(self.exchange)}\n"
        message += f"💰 Quantity: {_format_value(self.quantity)}\n"

        if self.price:
            message += f"💵 Price: {_format_value(self.price)}\n"

        return message
