"""Weakly-referenced change listener registry.

Registering a listener never extends its lifetime. References whose target
has been collected are pruned lazily, the next time the registry is
iterated for a notification.
"""

from __future__ import annotations

import inspect
import threading
import types
import weakref
from typing import Any, Callable, Protocol, Tuple


class OnPreferenceChangeListener(Protocol):
    def __call__(self, preferences: Any, key: str) -> None:
        ...


# Returns the listener, or None once it has been collected
ListenerRef = Callable[[], Any]


class _WeakBuiltinMethod:
    """Weak reference to a method of a built-in type, e.g. ``counts.__setitem__``.

    Holds the bound instance weakly and looks the method up again on each call.
    """

    def __init__(self, method: Any):
        self._self_ref = weakref.ref(method.__self__)
        self._name = method.__name__

    def __call__(self) -> Any:
        owner = self._self_ref()
        return None if owner is None else getattr(owner, self._name)


def _is_builtin_bound_method(listener: Any) -> bool:
    # Methods of built-in types (list.append, dict.__setitem__) are not WeakMethod-able
    if inspect.ismethod(listener):
        return False
    owner = getattr(listener, "__self__", None)
    return owner is not None and not isinstance(owner, types.ModuleType)


def _make_ref(listener: Callable[..., Any]) -> ListenerRef:
    # A bound method is a temporary object; track its instance and function instead
    if inspect.ismethod(listener):
        return weakref.WeakMethod(listener)
    if _is_builtin_bound_method(listener):
        try:
            return _WeakBuiltinMethod(listener)
        except TypeError:
            raise TypeError(
                f"Cannot register {listener!r}: {type(listener.__self__).__name__} "
                "instances cannot be weakly referenced; wrap the call in a function "
                "or object that stays alive"
            ) from None
    return weakref.ref(listener)


def _same_listener(target: Any, listener: Any) -> bool:
    if target is None:
        return False
    if target is listener:
        return True
    # Bound methods are recreated on each attribute access and compare by owner and function
    bound = inspect.ismethod(target) or _is_builtin_bound_method(target)
    return bound and target == listener


class ListenerRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        # Replaced wholesale on every change so iteration never sees a partial update
        self._refs: Tuple[ListenerRef, ...] = ()

    def __len__(self) -> int:
        return len(self._refs)

    def register(self, listener: OnPreferenceChangeListener) -> None:
        ref = _make_ref(listener)
        with self._lock:
            self._refs = self._refs + (ref,)

    def unregister(self, listener: OnPreferenceChangeListener) -> None:
        """Remove the first entry resolving to listener; no-op if there is none."""
        with self._lock:
            for i, ref in enumerate(self._refs):
                if _same_listener(ref(), listener):
                    # By position: weakref.ref(obj) returns the same object for
                    # repeated registrations of obj
                    self._refs = self._refs[:i] + self._refs[i + 1 :]
                    return

    def _discard(self, ref: ListenerRef) -> None:
        # Identity match drops every copy of the dead reference
        with self._lock:
            self._refs = tuple(r for r in self._refs if r is not ref)

    def notify(self, preferences: Any, key: str) -> None:
        for ref in self._refs:
            listener = ref()
            if listener is None:
                self._discard(ref)
            else:
                listener(preferences, key)
