"""Tests for the progress channel."""

import queue
import threading

import pytest

from stepback.migrations.channel import ProgressChannel, errors, method_names


class TestProgressChannel:
    def test_fifo_order_with_mixed_messages(self):
        channel = ProgressChannel()
        failure = RuntimeError("x")
        channel.send("a_up")
        channel.send(failure)
        channel.send("a_down")
        assert channel.drain() == ["a_up", failure, "a_down"]
        assert channel.drain() == []

    def test_unbounded_by_default(self):
        channel = ProgressChannel()
        for i in range(10_000):
            channel.send(f"step_{i}")
        assert channel.maxsize == 0
        assert len(channel.drain()) == 10_000

    def test_iteration_stops_at_close(self):
        channel = ProgressChannel()
        channel.send("a_up")
        channel.send("b_up")
        channel.close()
        assert list(channel) == ["a_up", "b_up"]
        assert list(channel) == []
        assert channel.get() is None

    def test_send_after_close_fails(self):
        channel = ProgressChannel()
        channel.close()
        with pytest.raises(RuntimeError):
            channel.send("a_up")

    def test_get_timeout(self):
        with pytest.raises(queue.Empty):
            ProgressChannel().get(timeout=0.01)

    def test_bounded_channel_blocks_until_drained(self):
        channel = ProgressChannel(maxsize=1)
        channel.send("first")
        sent = threading.Event()

        def producer():
            channel.send("second")
            sent.set()

        thread = threading.Thread(target=producer)
        thread.start()
        assert not sent.wait(timeout=0.05)
        assert channel.get(timeout=1) == "first"
        assert sent.wait(timeout=1)
        thread.join(timeout=1)
        assert channel.drain() == ["second"]

    def test_consumer_thread_sees_messages_in_order(self):
        channel = ProgressChannel()
        received = []

        consumer = threading.Thread(target=lambda: received.extend(channel))
        consumer.start()
        for name in ("a_up", "b_up", "c_up"):
            channel.send(name)
        channel.close()
        consumer.join(timeout=1)

        assert received == ["a_up", "b_up", "c_up"]


def test_message_filters():
    failure = ValueError("bad")
    messages = ["a_up", failure, "a_down"]
    assert method_names(messages) == ["a_up", "a_down"]
    assert errors(messages) == [failure]
