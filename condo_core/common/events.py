# condo_core/common/events.py
"""
In-process domain events. Apps publish plain dict payloads (ids, not model
instances) and other apps react without importing the publisher.
"""
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

ASSEMBLY_CREATED = "assembly.created"

Payload = Dict[str, Any]
Handler = Callable[[Payload], None]

_registry: Dict[str, List[Handler]] = defaultdict(list)


def subscribe(event_name: str):
    """Decorator: run the function for every `event_name` publication."""

    def register(fn: Handler) -> Handler:
        _registry[event_name].append(fn)
        return fn

    return register


def publish(event_name: str, payload: Payload) -> int:
    """
    Calls the handlers synchronously, in registration order, and returns how
    many succeeded. A handler error is logged and the rest still run.
    """
    delivered = 0
    for handler in list(_registry.get(event_name, ())):
        try:
            handler(payload)
        except Exception:
            logger.exception("Event handler %s failed for %s", getattr(handler, "__qualname__", handler), event_name)
            continue
        delivered += 1
    logger.debug("Event %s delivered to %d handler(s)", event_name, delivered)
    return delivered
