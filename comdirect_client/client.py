"""
comdirect API client.

This module wires the session lifecycle, the TAN handshake and the
transaction authorizer into one client object. It handles:

- Session creation, refresh and revocation
- Placing, changing and deleting orders (validate → commit)
- Cost indications, prevalidation and quotes
- Fetching orders to obtain handles for change and delete

The client is a context manager; leaving the block revokes the session.
"""

import logging
from datetime import datetime
from typing import Any, Callable, List, Optional

from . import endpoints
from .brokerage.authorizer import TransactionAuthorizer
from .brokerage.orders import (
    ChangeOrder,
    CostIndication,
    DeleteOrder,
    MutationIntent,
    Order,
    OrderValidity,
    PlaceOrder,
)
from .brokerage.quotes import Quote, QuoteRequester
from .config import ComdirectConfig
from .exceptions import ComdirectError, UnexpectedResponseShapeError
from .oauth.token_exchanger import OAuthTokenExchanger
from .session.access import SessionGuard
from .session.establisher import SessionEstablisher
from .session.lifecycle import SessionLifecycle
from .tan.activator import TanActivator
from .tan.challenge import TanChallenge
from .tan.confirmation import ConfirmationProvider, ConsoleConfirmationProvider
from .tan.negotiator import TanNegotiator
from .transport import HttpTransport, decode_json

logger = logging.getLogger(__name__)


class ComdirectClient:
    """
    Client for the comdirect brokerage API.

    Example:
        from comdirect_client import ComdirectClient

        with ComdirectClient() as client:
            client.new_session()  # confirm the push TAN in the app
            order = client.place_order(outline)
            client.change_order(order, limit={"value": "101", "unit": "EUR"})
            client.delete_order(order)
    """

    def __init__(
        self,
        config: Optional[ComdirectConfig] = None,
        confirmation_provider: Optional[ConfirmationProvider] = None,
        transport: Optional[HttpTransport] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize comdirect client.

        Args:
            config: Client configuration (loads from environment if not provided)
            confirmation_provider: Source of TAN confirmations
                                   (console prompts if not provided)
            transport: HTTP transport (creates one from config if not provided)
            clock: Current-time source for token expiry
        """
        self.config = config or ComdirectConfig.from_env()
        self.transport = transport or HttpTransport(
            self.config.base_url, timeout=self.config.timeout
        )
        self.guard = SessionGuard()

        self.lifecycle = SessionLifecycle(
            exchanger=OAuthTokenExchanger(self.config, self.transport, clock=clock),
            establisher=SessionEstablisher(self.transport),
            negotiator=TanNegotiator(self.transport),
            activator=TanActivator(
                self.transport,
                confirmation_provider or ConsoleConfirmationProvider(),
                confirmation_timeout=self.config.confirmation_timeout,
            ),
            guard=self.guard,
        )
        self.authorizer = TransactionAuthorizer(self.transport, self.guard)
        self.quotes = QuoteRequester(self.transport, self.guard)

        logger.info("ComdirectClient initialized")

    def __enter__(self) -> "ComdirectClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    # Session

    def new_session(self) -> None:
        """Create a TAN-activated session (blocks until the TAN is confirmed)."""
        self.lifecycle.new_session()

    def refresh_session(self) -> None:
        """Refresh the session's tokens; call before they expire."""
        self.lifecycle.refresh_session()

    def end_session(self) -> None:
        """Revoke and forget the session."""
        self.lifecycle.end_session()

    def close(self) -> None:
        """Revoke the session if there is one, ignoring errors, and close HTTP."""
        self.lifecycle.close()
        self.transport.close()

    @property
    def has_session(self) -> bool:
        return self.lifecycle.has_session

    @property
    def session_expires_at(self) -> Optional[datetime]:
        return self.lifecycle.session_expires_at

    # Generic validate / commit

    def validate(self, intent: MutationIntent) -> TanChallenge:
        """Validate any mutation; see TransactionAuthorizer.validate."""
        return self.authorizer.validate(intent)

    def commit(self, intent: MutationIntent, challenge: TanChallenge) -> Any:
        """Commit a validated mutation; see TransactionAuthorizer.commit."""
        return self.authorizer.commit(intent, challenge)

    # Orders

    def place_order(self, outline: dict) -> Order:
        """
        Place an order.

        Args:
            outline: Order outline JSON

        Returns:
            The placed order
        """
        return self.authorizer.authorize(PlaceOrder(outline))

    def change_order(
        self,
        order: Order,
        leg: int = 0,
        limit: Optional[Any] = None,
        trigger_limit: Optional[Any] = None,
        absolute_trailing_limit: Optional[Any] = None,
        relative_trailing_limit: Optional[Any] = None,
        validity: Optional[OrderValidity] = None,
    ) -> None:
        """
        Change an order; the given fields are applied to `order` on success.

        Args:
            order: Order to change
            leg: Leg index for combination orders
        """
        intent = ChangeOrder(
            order,
            leg=leg,
            limit=limit,
            trigger_limit=trigger_limit,
            absolute_trailing_limit=absolute_trailing_limit,
            relative_trailing_limit=relative_trailing_limit,
            validity=validity,
        )
        self.authorizer.authorize(intent)

    def delete_order(self, order: Order) -> None:
        """
        Delete an order.

        Raises:
            ComdirectError: With `order` attached, so the caller keeps it
        """
        try:
            self.authorizer.authorize(DeleteOrder(order))
        except ComdirectError as e:
            e.order = order
            raise

    def order_cost_indication(self, outline: dict) -> CostIndication:
        return self.authorizer.cost_indication(PlaceOrder(outline))

    def order_change_cost_indication(
        self, order: Order, leg: int = 0, **changes: Any
    ) -> CostIndication:
        return self.authorizer.cost_indication(ChangeOrder(order, leg=leg, **changes))

    def order_deletion_cost_indication(self, order: Order) -> CostIndication:
        """
        Cost indication for deleting an order.

        comdirect does not reliably serve this endpoint; expect the server to
        reject the request (typically with a ClientError).
        """
        return self.authorizer.cost_indication(DeleteOrder(order))

    def prevalidate_order(self, outline: dict) -> None:
        self.authorizer.prevalidate(PlaceOrder(outline))

    def prevalidate_order_change(self, order: Order, leg: int = 0, **changes: Any) -> None:
        self.authorizer.prevalidate(ChangeOrder(order, leg=leg, **changes))

    def prevalidate_order_deletion(self, order: Order) -> None:
        self.authorizer.prevalidate(DeleteOrder(order))

    # Quotes

    def request_quote(self, outline: dict) -> Quote:
        """Request a quote; place the resulting order with place_order()."""
        return self.quotes.request_quote(outline)

    # Reads

    def get_orders(self, depot_id: str, **filters: Any) -> List[Order]:
        """
        Get the orders of a depot.

        Args:
            depot_id: Depot id
            **filters: Query filters (orderStatus, venueId, side, orderType)

        Returns:
            List of orders
        """
        with self.guard.read() as session:
            response = self.transport.request(
                "GET",
                endpoints.DEPOT_ORDERS.format(depot_id=depot_id),
                access_token=session.access_token,
                session_id=session.session_id,
                params=filters or None,
            )
        data = decode_json(response)
        if not isinstance(data, dict) or not isinstance(data.get("values"), list):
            raise UnexpectedResponseShapeError(f"Order list without values: {data!r}")
        return [Order.from_dict(item) for item in data["values"]]

    def get_order(self, order_id: str) -> Order:
        with self.guard.read() as session:
            response = self.transport.request(
                "GET",
                endpoints.ORDER.format(order_id=order_id),
                access_token=session.access_token,
                session_id=session.session_id,
            )
        return Order.from_dict(decode_json(response))
