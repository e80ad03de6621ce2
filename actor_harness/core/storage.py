"""Durable key-value storage and alarm schedule for one actor."""

import copy
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Optional, Union

AlarmListener = Callable[[Optional[float]], None]


class ActorStorage:
    """In-memory durable storage for one actor id.

    Values are deep-copied on the way in and out so callers never share
    mutable state with the store. Alarm times are milliseconds since the
    epoch.
    """

    def __init__(self):
        self._data: Dict[str, Any] = {}
        self._alarm: Optional[float] = None
        self._listener: Optional[AlarmListener] = None

    def set_alarm_listener(self, listener: Optional[AlarmListener]) -> None:
        """
        Register the callable told about every alarm schedule change.

        Args:
            listener: Called with the new alarm time, or None when cleared
        """
        self._listener = listener

    @property
    def alarm_time(self) -> Optional[float]:
        """Scheduled alarm time without going through the async API."""
        return self._alarm

    async def get(self, key: Union[str, Iterable[str]]) -> Any:
        """
        Read one key, or several keys as a dict of those present.

        Args:
            key: Key or iterable of keys
        """
        if isinstance(key, str):
            return copy.deepcopy(self._data.get(key))
        return {k: copy.deepcopy(self._data[k]) for k in key if k in self._data}

    async def put(self, key: Union[str, Dict[str, Any]], value: Any = None) -> None:
        """
        Write one key, or every entry of a dict.

        Args:
            key: Key, or dict of entries to write
            value: Value to write when ``key`` is a string
        """
        entries = key if isinstance(key, dict) else {key: value}
        for k, v in entries.items():
            self._data[k] = copy.deepcopy(v)

    async def delete(self, key: Union[str, Iterable[str]]) -> Union[bool, int]:
        """
        Delete one key (returns whether it existed) or several (returns count).
        """
        if isinstance(key, str):
            return self._data.pop(key, _MISSING) is not _MISSING
        return sum(1 for k in list(key) if self._data.pop(k, _MISSING) is not _MISSING)

    async def list(self, prefix: Optional[str] = None) -> Dict[str, Any]:
        """List entries in key order, optionally restricted to a prefix."""
        return {
            k: copy.deepcopy(self._data[k])
            for k in sorted(self._data)
            if prefix is None or k.startswith(prefix)
        }

    async def delete_all(self) -> None:
        """Delete every key. The alarm schedule is left alone."""
        self._data.clear()

    async def get_alarm(self) -> Optional[float]:
        """Get the scheduled alarm time, or None when nothing is scheduled."""
        return self._alarm

    async def set_alarm(self, scheduled_time: Union[float, int, datetime]) -> None:
        """
        Schedule the alarm, replacing any existing schedule.

        Args:
            scheduled_time: Milliseconds since the epoch, or a datetime
        """
        if isinstance(scheduled_time, datetime):
            scheduled_time = scheduled_time.timestamp() * 1000
        self._alarm = float(scheduled_time)
        self._notify()

    async def delete_alarm(self) -> None:
        """Clear the alarm schedule."""
        self._alarm = None
        self._notify()

    def _notify(self) -> None:
        if self._listener is not None:
            self._listener(self._alarm)


_MISSING = object()
