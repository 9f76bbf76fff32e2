"""
Orders and the mutations that can be authorized against them.

Order payloads are forwarded as given; this module only knows which
endpoint each mutation validates against and how it is committed.
"""

import copy
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

from .. import endpoints
from ..exceptions import UnexpectedResponseShapeError
from ..transport import decode_json

logger = logging.getLogger(__name__)


@dataclass
class OrderValidity:
    """
    Order validity, flattened into order JSON as validityType / validity.

    Attributes:
        validity_type: "GFD" (good for day) or "GTD" (good till date)
        date: Expiry date (YYYY-MM-DD) for GTD orders
    """

    validity_type: str
    date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"validityType": self.validity_type}
        if self.date is not None:
            data["validity"] = self.date
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["OrderValidity"]:
        if "validityType" not in data:
            return None
        return cls(validity_type=data["validityType"], date=data.get("validity"))


@dataclass
class Order:
    """
    A brokerage order.

    Price fields keep the API's amount-value objects
    ({"value": "12.5", "unit": "EUR"}) as they are.

    Attributes:
        order_id: Server order id
        depot_id: Depot the order belongs to
        order_type: e.g. LIMIT, MARKET, ONE_CANCELS_OTHER
        status: Order status
        limit: Limit price
        trigger_limit: Stop trigger price
        absolute_trailing_limit: Trailing stop distance (absolute)
        relative_trailing_limit: Trailing stop distance (percent)
        validity: Order validity
        sub_orders: Legs of a combination order
        raw: Full response object
    """

    order_id: str
    depot_id: Optional[str] = None
    order_type: Optional[str] = None
    status: Optional[str] = None
    limit: Optional[Any] = None
    trigger_limit: Optional[Any] = None
    absolute_trailing_limit: Optional[Any] = None
    relative_trailing_limit: Optional[Any] = None
    validity: Optional[OrderValidity] = None
    sub_orders: List["Order"] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> "Order":
        """
        Create Order from a decoded order object.

        Raises:
            UnexpectedResponseShapeError: If the object has no orderId
        """
        if not isinstance(data, dict) or "orderId" not in data:
            raise UnexpectedResponseShapeError(f"Order without orderId: {data!r}")

        return cls(
            order_id=str(data["orderId"]),
            depot_id=data.get("depotId"),
            order_type=data.get("orderType"),
            status=data.get("orderStatus"),
            limit=data.get("limit"),
            trigger_limit=data.get("triggerLimit"),
            absolute_trailing_limit=data.get("trailingLimitDistAbs"),
            relative_trailing_limit=data.get("trailingLimitDistRel"),
            validity=OrderValidity.from_dict(data),
            sub_orders=[cls.from_dict(sub) for sub in data.get("subOrders") or []],
            raw=copy.deepcopy(data),
        )

    @property
    def is_combination(self) -> bool:
        return bool(self.sub_orders)

    def leg(self, index: int = 0) -> "Order":
        """
        The order itself, or one leg of a combination order.

        Raises:
            ValueError: If the order has no leg with this index
        """
        if not self.is_combination:
            if index != 0:
                raise ValueError(f"Order {self.order_id} is not a combination order")
            return self
        if not 0 <= index < len(self.sub_orders):
            raise ValueError(
                f"Order {self.order_id} has {len(self.sub_orders)} legs, got leg {index}"
            )
        return self.sub_orders[index]


class MutationIntent(ABC):
    """
    A brokerage mutation that needs validation before it is committed.

    Subclasses define the payload, the resource and the commit verb.
    """

    commit_method: str = "POST"

    @property
    @abstractmethod
    def resource_path(self) -> str:
        pass

    @property
    def validation_path(self) -> str:
        return f"{self.resource_path}/validation"

    @property
    def prevalidation_path(self) -> str:
        return f"{self.resource_path}/prevalidation"

    @property
    def cost_indication_path(self) -> str:
        return f"{self.resource_path}/costindicationexante"

    @abstractmethod
    def payload(self) -> Dict[str, Any]:
        pass

    def apply(self, response: requests.Response) -> Any:
        """Update local state from a successful commit."""
        return None


class PlaceOrder(MutationIntent):
    """
    Place a new order from an order outline.

    The outline is the JSON object the API expects, e.g.
    {"depotId": ..., "side": "BUY", "instrumentId": ..., "orderType": "LIMIT",
     "quantity": {"value": "10", "unit": "XXX"}, "limit": {...}, "venueId": ...}
    """

    commit_method = "POST"

    def __init__(self, outline: Dict[str, Any]):
        self.outline = outline

    @property
    def resource_path(self) -> str:
        return endpoints.ORDERS

    def payload(self) -> Dict[str, Any]:
        return self.outline

    def apply(self, response: requests.Response) -> Order:
        order = Order.from_dict(decode_json(response))
        logger.info(f"Order {order.order_id} placed")
        return order


class ChangeOrder(MutationIntent):
    """
    Change limit, trigger, trailing distance or validity of an order.

    Only the fields passed in are sent. After a successful commit they are
    copied into the targeted order (or leg), so it need not be fetched again.
    """

    commit_method = "PATCH"

    def __init__(
        self,
        order: Order,
        leg: int = 0,
        limit: Optional[Any] = None,
        trigger_limit: Optional[Any] = None,
        absolute_trailing_limit: Optional[Any] = None,
        relative_trailing_limit: Optional[Any] = None,
        validity: Optional[OrderValidity] = None,
    ):
        self.target = order.leg(leg)
        self.changes: Dict[str, Any] = {
            name: copy.deepcopy(value)
            for name, value in (
                ("limit", limit),
                ("trigger_limit", trigger_limit),
                ("absolute_trailing_limit", absolute_trailing_limit),
                ("relative_trailing_limit", relative_trailing_limit),
                ("validity", validity),
            )
            if value is not None
        }
        if not self.changes:
            raise ValueError("ChangeOrder needs at least one changed field")

    @property
    def resource_path(self) -> str:
        return endpoints.ORDER.format(order_id=self.target.order_id)

    def payload(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"orderId": self.target.order_id}
        for name, value in self.changes.items():
            if name == "validity":
                data.update(value.to_dict())
            else:
                data[_WIRE_NAMES[name]] = value
        return data

    def apply(self, response: requests.Response) -> None:
        for name, value in self.changes.items():
            setattr(self.target, name, value)
            if name == "validity":
                self.target.raw.update(value.to_dict())
            else:
                self.target.raw[_WIRE_NAMES[name]] = value
        logger.info(f"Order {self.target.order_id} changed ({', '.join(self.changes)})")


class DeleteOrder(MutationIntent):
    """Delete (cancel) an order. The payload is an empty object."""

    commit_method = "DELETE"

    def __init__(self, order: Order):
        self.order = order

    @property
    def resource_path(self) -> str:
        return endpoints.ORDER.format(order_id=self.order.order_id)

    def payload(self) -> Dict[str, Any]:
        return {}

    def apply(self, response: requests.Response) -> None:
        logger.info(f"Order {self.order.order_id} deleted")


_WIRE_NAMES = {
    "limit": "limit",
    "trigger_limit": "triggerLimit",
    "absolute_trailing_limit": "trailingLimitDistAbs",
    "relative_trailing_limit": "trailingLimitDistRel",
}


@dataclass
class CostIndication:
    """
    Ex-ante cost indication for a mutation.

    Attributes:
        intent: Mutation the costs were computed for
        raw: Cost indication object as returned by the API
    """

    intent: MutationIntent
    raw: Dict[str, Any]

    @property
    def total_costs(self) -> Optional[Any]:
        return self.raw.get("totalCostsAbs")

    @property
    def expected_value(self) -> Optional[Any]:
        return self.raw.get("expectedValue")

    @classmethod
    def from_response(cls, intent: MutationIntent, data: Any) -> "CostIndication":
        """
        Create CostIndication from a {"values": [...]} response.

        Raises:
            UnexpectedResponseShapeError: If values is missing or empty
        """
        values = data.get("values") if isinstance(data, dict) else None
        if not values:
            raise UnexpectedResponseShapeError(f"Cost indication without values: {data!r}")
        return cls(intent=intent, raw=values[0])
