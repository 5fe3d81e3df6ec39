import threading
import time

from school_api.utils.locks import KeyedLock


def test_same_key_is_serialized():
    locks = KeyedLock()
    active = []
    overlaps = []

    def work():
        with locks.hold(1):
            active.append(1)
            if len(active) > 1:
                overlaps.append(True)
            time.sleep(0.01)
            active.pop()

    threads = [threading.Thread(target=work) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert overlaps == []


def test_different_keys_do_not_block():
    locks = KeyedLock()
    with locks.hold("a"):
        acquired = threading.Event()

        def other():
            with locks.hold("b"):
                acquired.set()

        t = threading.Thread(target=other)
        t.start()
        assert acquired.wait(timeout=1)
        t.join()


def test_idle_keys_are_forgotten():
    locks = KeyedLock()
    for key in range(50):
        with locks.hold(key):
            assert len(locks) == 1
    assert len(locks) == 0


def test_key_stays_while_a_waiter_is_queued():
    locks = KeyedLock()
    entered = threading.Event()

    def waiter():
        with locks.hold(7):
            entered.set()

    with locks.hold(7):
        t = threading.Thread(target=waiter)
        t.start()
        time.sleep(0.05)
        assert len(locks) == 1
        assert not entered.is_set()
    t.join(timeout=1)
    assert entered.is_set()
    assert len(locks) == 0


def test_released_after_exception():
    locks = KeyedLock()
    try:
        with locks.hold("x"):
            raise ValueError("boom")
    except ValueError:
        pass
    assert len(locks) == 0
    with locks.hold("x"):
        pass
