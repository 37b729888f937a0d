"""Topic listeners and the binding registry.

Example:
    ```python
    from hookpost.listeners import ListenerRegistry

    registry = ListenerRegistry(reader, queue, bus, settings)
    registry.bootstrap()
    ```
"""

from .base import DeletedListener, DeliverCallback, Listener
from .registry import (
    ListenerRegistry,
    get_listener_registry,
    reset_listener_registry,
    set_listener_registry,
)
from .resources import (
    LISTENERS,
    CouponCreated,
    CouponDeleted,
    CouponRestored,
    CouponUpdated,
    CustomerCreated,
    CustomerDeleted,
    CustomerUpdated,
    OrderCreated,
    OrderDeleted,
    OrderRestored,
    OrderUpdated,
    ProductCreated,
    ProductDeleted,
    ProductRestored,
    ProductUpdated,
    get_listener_class,
)

__all__ = [
    "LISTENERS",
    "DeletedListener",
    "DeliverCallback",
    "Listener",
    "ListenerRegistry",
    "get_listener_class",
    "get_listener_registry",
    "reset_listener_registry",
    "set_listener_registry",
    # Topic listeners
    "CouponCreated",
    "CouponDeleted",
    "CouponRestored",
    "CouponUpdated",
    "CustomerCreated",
    "CustomerDeleted",
    "CustomerUpdated",
    "OrderCreated",
    "OrderDeleted",
    "OrderRestored",
    "OrderUpdated",
    "ProductCreated",
    "ProductDeleted",
    "ProductRestored",
    "ProductUpdated",
]
