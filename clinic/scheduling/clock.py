import datetime as dt


class FrozenClock:
    """Deterministic stand-in for ``datetime.now``.

    Pass an instance wherever a ``Clock`` is expected. Call ``advance`` to
    move time forward between operations.
    """

    def __init__(self, now: dt.datetime) -> None:
        self.current = now

    def __call__(self) -> dt.datetime:
        return self.current

    def advance(self, delta: dt.timedelta) -> None:
        self.current += delta
