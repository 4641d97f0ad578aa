"""
Process-wide patch state shared by the request and send interceptors.
"""

import inspect
import logging

import opentracing

logger = logging.getLogger(__name__)


def never_ignore(*args) -> bool:
    """Default ignore predicate: every call is traced."""
    return False


class Interception:
    """
    Replaces ``method_name`` on a set of client classes with a tracing wrapper.

    The original implementation is kept on the class under ``original_slot``
    and the wrappers delegate through that attribute. The tracer and ignore
    predicate are read from this object on every call, so instrumenting again
    swaps them without touching the captured original.

    ``instrument`` and ``remove`` are not synchronised; call them before
    concurrent traffic starts.
    """

    def __init__(self, method_name: str, original_slot: str, make_wrapper, make_async_wrapper):
        self.method_name = method_name
        self.original_slot = original_slot
        self._make_wrapper = make_wrapper
        self._make_async_wrapper = make_async_wrapper
        self.tracer = None
        self.ignore_request = None
        # patched class -> whether it defined the method itself
        self._owned = {}

    def is_instrumented(self, client_class=None) -> bool:
        if client_class is None:
            return bool(self._owned)
        return self.original_slot in vars(client_class)

    def instrument(self, targets, tracer=None, ignore_request=None) -> None:
        """
        Patch every ``(client_class, is_async)`` pair in ``targets``.

        ``tracer`` defaults to the globally registered OpenTracing tracer and
        ``ignore_request`` to a predicate that never ignores.
        """
        self.tracer = tracer if tracer is not None else opentracing.global_tracer()
        self.ignore_request = ignore_request if ignore_request is not None else never_ignore
        for client_class, is_async in targets:
            if self.is_instrumented(client_class):
                logger.debug("%s.%s already instrumented, swapping tracer",
                             client_class.__name__, self.method_name)
                continue
            self._patch(client_class, is_async)

    def _patch(self, client_class, is_async: bool) -> None:
        original = inspect.getattr_static(client_class, self.method_name)
        self._owned[client_class] = self.method_name in vars(client_class)
        setattr(client_class, self.original_slot, original)
        make_wrapper = self._make_async_wrapper if is_async else self._make_wrapper
        setattr(client_class, self.method_name, make_wrapper(self))
        logger.debug("Instrumented %s.%s", client_class.__name__, self.method_name)

    def remove(self) -> None:
        """Restore every patched class and clear the tracer and predicate."""
        for client_class, owned in list(self._owned.items()):
            if self.is_instrumented(client_class):
                original = vars(client_class)[self.original_slot]
                if owned:
                    setattr(client_class, self.method_name, original)
                else:
                    delattr(client_class, self.method_name)
                delattr(client_class, self.original_slot)
                logger.debug("Removed instrumentation from %s.%s",
                             client_class.__name__, self.method_name)
            del self._owned[client_class]
        self.tracer = None
        self.ignore_request = None
