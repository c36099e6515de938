from eventhub.db.session_store import SessionStore


class FakeTime:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_create_and_get():
    sessions = SessionStore(ttl_seconds=60)
    sid = sessions.create(5)
    assert sessions.get(sid) == 5
    assert sessions.get("unknown") is None


def test_destroy():
    sessions = SessionStore(ttl_seconds=60)
    sid = sessions.create(5)
    assert sessions.destroy(sid) is True
    assert sessions.destroy(sid) is False
    assert sessions.get(sid) is None


def test_expired_session_is_dropped_on_lookup():
    now = FakeTime()
    sessions = SessionStore(ttl_seconds=60, clock=now)
    sid = sessions.create(5)

    now.now += 59
    assert sessions.get(sid) == 5
    now.now += 1
    assert sessions.get(sid) is None
    assert len(sessions) == 0


def test_periodic_prune_removes_expired_entries():
    now = FakeTime()
    sessions = SessionStore(ttl_seconds=10, check_period=100, clock=now)
    sessions.create(1)
    sessions.create(2)

    now.now += 50
    live = sessions.create(3)
    assert len(sessions) == 3  # not yet time for a sweep

    now.now += 50
    sessions.get(live)
    assert len(sessions) == 0


def test_prune_returns_number_removed():
    now = FakeTime()
    sessions = SessionStore(ttl_seconds=10, clock=now)
    sessions.create(1)
    now.now += 5
    sessions.create(2)
    now.now += 6
    assert sessions.prune() == 1
    assert len(sessions) == 1


def test_clear():
    sessions = SessionStore(ttl_seconds=60)
    sessions.create(1)
    sessions.clear()
    assert len(sessions) == 0
