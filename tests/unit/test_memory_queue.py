"""
Unit tests for the in-process delay queue.
"""
import pytest

from image_compressor.queue import MemoryDelayQueue
from tests.fakes import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def queue(clock):
    return MemoryDelayQueue(name="q", clock=clock)


@pytest.mark.unit
class TestMemoryDelayQueue:
    """Test the in-memory delay queue."""

    def test_receive_on_empty_queue(self, queue):
        """Test receiving from an empty queue."""
        assert queue.receive() == []

    def test_zero_visibility_leaves_message_claimable(self, queue):
        """Test a zero visibility claim leaves the message claimable."""
        queue.send("a")

        first = queue.receive(visibility_timeout=0)
        second = queue.receive(visibility_timeout=0)

        assert [m.body for m in first] == ["a"]
        assert [m.message_id for m in second] == [first[0].message_id]

    def test_visibility_timeout_hides_message(self, queue, clock):
        """Test a visibility timeout hides the message."""
        queue.send("a")

        queue.receive(visibility_timeout=30)
        assert queue.receive() == []

        clock.advance(30_000)
        assert [m.body for m in queue.receive()] == ["a"]

    def test_receive_respects_max_messages_and_order(self, queue):
        """Test receive batch size and ordering."""
        for body in ("a", "b", "c"):
            queue.send(body)

        assert [m.body for m in queue.receive(max_messages=2)] == ["a", "b"]

    def test_claimed_message_moves_behind_unclaimed_ones(self, queue, clock):
        """Test claimed messages move behind unclaimed ones."""
        queue.send("a")
        queue.send("b")

        clock.advance(1)
        queue.receive(max_messages=1)

        assert [m.body for m in queue.receive(max_messages=2)] == ["b", "a"]

    def test_delayed_send(self, queue, clock):
        """Test sending with a delay."""
        queue.send("later", delay_seconds=10)

        assert queue.receive() == []
        clock.advance(10_000)
        assert [m.body for m in queue.receive()] == ["later"]

    def test_delete_is_idempotent(self, queue):
        """Test deleting twice."""
        queue.send("a")
        message = queue.receive()[0]

        assert queue.delete(message.receipt_handle) is True
        assert queue.delete(message.receipt_handle) is False
        assert queue.approximate_size() == 0

    def test_change_visibility(self, queue, clock):
        """Test changing message visibility."""
        queue.send("a")
        message = queue.receive()[0]

        assert queue.change_visibility(message.receipt_handle, 60) is True
        assert queue.receive() == []
        assert queue.change_visibility("missing", 60) is False
