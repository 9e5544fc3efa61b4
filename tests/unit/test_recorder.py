"""
Unit tests for the lifecycle recorder.
"""
import json
from unittest.mock import MagicMock

import pytest

from image_compressor.core.exceptions import MalformedEventError, QueueUnavailableError
from image_compressor.lifecycle import LifecycleRecord, LifecycleRecorder
from image_compressor.storage import KeyNamespace
from tests.fakes import T0, TEST_BUCKET, object_created_event


@pytest.fixture
def recorder(queue, clock):
    return LifecycleRecorder(queue, KeyNamespace(bucket_name=TEST_BUCKET), clock=clock)


@pytest.mark.unit
class TestRecord:
    """Test LifecycleRecorder.record."""

    def test_enqueues_record_with_current_time(self, recorder, queue):
        """Test a record is enqueued with the current time."""
        record = recorder.record(TEST_BUCKET, "uploads/1700000000000.png")

        assert record == LifecycleRecord(TEST_BUCKET, "uploads/1700000000000.png", T0)
        messages = queue.receive()
        assert json.loads(messages[0].body) == {
            "bucket": TEST_BUCKET,
            "key": "uploads/1700000000000.png",
            "createdAt": T0,
        }

    def test_duplicate_events_create_duplicate_records(self, recorder, queue):
        """Test duplicate events are not deduplicated."""
        recorder.record(TEST_BUCKET, "uploads/1.png")
        recorder.record(TEST_BUCKET, "uploads/1.png")

        assert queue.approximate_size() == 2

    @pytest.mark.parametrize("key", ["compressed/1.png", "other/1.png"])
    def test_skips_non_originals(self, recorder, queue, key):
        """Test non-original keys are skipped."""
        assert recorder.record(TEST_BUCKET, key) is None
        assert queue.approximate_size() == 0

    def test_queue_failure_propagates(self, clock):
        """Test queue failures propagate."""
        failing_queue = MagicMock()
        failing_queue.send.side_effect = QueueUnavailableError("redis down")
        recorder = LifecycleRecorder(failing_queue, KeyNamespace(), clock=clock)

        with pytest.raises(QueueUnavailableError):
            recorder.record(TEST_BUCKET, "uploads/1.png")


@pytest.mark.unit
class TestRecordEvent:
    """Test LifecycleRecorder.record_event."""

    def test_records_object_created_notification(self, recorder, queue):
        """Test recording an object created notification."""
        records = recorder.record_event(object_created_event("uploads/1700000000000.png"))

        assert [r.key for r in records] == ["uploads/1700000000000.png"]
        assert queue.approximate_size() == 1

    def test_records_every_entry(self, recorder, queue):
        """Test every notification entry is recorded."""
        event = object_created_event("uploads/1.png")
        event["Records"] += object_created_event("uploads/2.jpg")["Records"]

        records = recorder.record_event(event)

        assert [r.key for r in records] == ["uploads/1.png", "uploads/2.jpg"]

    def test_unquotes_keys(self, recorder):
        """Test URL-encoded keys are decoded."""
        records = recorder.record_event(object_created_event("uploads/my+photo%281%29.png"))

        assert records[0].key == "uploads/my photo(1).png"

    def test_ignores_compressed_copies(self, recorder, queue):
        """Test compressed copies are ignored."""
        assert recorder.record_event(object_created_event("compressed/1.png")) == []
        assert queue.approximate_size() == 0

    def test_ignores_non_create_events(self, recorder, queue):
        """Test non-create events are ignored."""
        event = object_created_event("uploads/1.png", event_name="s3:ObjectRemoved:Delete")

        assert recorder.record_event(event) == []
        assert queue.approximate_size() == 0

    @pytest.mark.parametrize("event", [
        {},
        {"Records": []},
        {"Records": "nope"},
        {"Records": [{"eventName": "s3:ObjectCreated:Put", "s3": {"bucket": {"name": "b"}}}]},
    ])
    def test_rejects_malformed_notifications(self, recorder, event):
        """Test malformed notifications are rejected."""
        with pytest.raises(MalformedEventError):
            recorder.record_event(event)

    def test_malformed_entry_enqueues_nothing(self, recorder, queue):
        """Test one malformed entry enqueues nothing."""
        event = object_created_event("uploads/1.png")
        event["Records"].append({"eventName": "s3:ObjectCreated:Put"})

        with pytest.raises(MalformedEventError):
            recorder.record_event(event)

        assert queue.approximate_size() == 0

    @pytest.mark.parametrize("bucket, key", [
        ("test-bucket", 123),
        ("test-bucket", None),
        ("test-bucket", ""),
        (["test-bucket"], "uploads/1.png"),
    ])
    def test_rejects_non_string_locations(self, recorder, queue, bucket, key):
        """Test notifications whose bucket or key is not a string are rejected."""
        event = object_created_event("uploads/1.png")
        event["Records"][0]["s3"]["bucket"]["name"] = bucket
        event["Records"][0]["s3"]["object"]["key"] = key

        with pytest.raises(MalformedEventError):
            recorder.record_event(event)

        assert queue.approximate_size() == 0
