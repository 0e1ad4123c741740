"""
Reactive key-value state store.

A minimal publish/subscribe store that other components observe. Notification is
synchronous: every listener registered for a key runs, in registration order, before
set() returns. There is no batching and no deferred scheduling.

Re-entrancy: a listener that sets the key it is being notified about would recurse.
Such nested sets are detected and dropped (set() returns False). Setting a different
key from inside a listener is allowed and notifies that key's listeners immediately.
"""

from typing import Any, Callable, Dict, List, Set

from loguru import logger

Listener = Callable[[Any, Any, str], None]


class StateStore:
    """
    Synchronous publish/subscribe store.

    Listeners are called as callback(new_value, old_value, key). A listener raising an
    exception is logged and does not prevent the remaining listeners from running.

    Example:
        store = StateStore({"lob": None})
        unsubscribe = store.subscribe("lob", lambda new, old, key: print(new))
        store.set("lob", "finance")   # prints "finance"
        unsubscribe()
    """

    def __init__(self, initial: Dict[str, Any] = None):
        self._state: Dict[str, Any] = dict(initial or {})
        self._listeners: Dict[str, List[Listener]] = {}
        self._notifying: Set[str] = set()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key (default if unset)."""
        return self._state.get(key, default)

    def set(self, key: str, value: Any) -> bool:
        """
        Store value under key and notify the key's listeners.

        Args:
            key: State key
            value: New value

        Returns:
            True if the value was applied, False if the call was dropped because it
            was made from within the same key's notification cycle
        """
        if key in self._notifying:
            logger.warning(f"Dropped nested set of '{key}' during its own notification")
            return False

        old_value = self._state.get(key)
        self._state[key] = value

        if self._listeners.get(key):
            self._notify(key, value, old_value)

        return True

    def subscribe(self, key: str, callback: Listener) -> Callable[[], None]:
        """
        Register a listener for key.

        The same callable may be registered more than once; each registration is
        notified and each returned handle removes exactly one registration.

        Returns:
            Unsubscribe function (safe to call more than once)
        """
        listeners = self._listeners.setdefault(key, [])
        listeners.append(callback)
        handle = {"active": True}

        def unsubscribe() -> None:
            if not handle["active"]:
                return
            handle["active"] = False
            current = self._listeners.get(key, [])
            if callback in current:
                current.remove(callback)

        return unsubscribe

    def listener_count(self, key: str) -> int:
        """Number of listeners currently registered for key."""
        return len(self._listeners.get(key, []))

    def keys(self) -> List[str]:
        """Keys currently holding a value."""
        return list(self._state.keys())

    def snapshot(self) -> Dict[str, Any]:
        """Shallow copy of the whole state (for debugging and exports)."""
        return dict(self._state)

    def _notify(self, key: str, new_value: Any, old_value: Any) -> None:
        self._notifying.add(key)
        try:
            # Copy so listeners may unsubscribe during notification
            for callback in list(self._listeners.get(key, [])):
                try:
                    callback(new_value, old_value, key)
                except Exception:
                    logger.exception(f"State listener for '{key}' raised")
        finally:
            self._notifying.discard(key)
