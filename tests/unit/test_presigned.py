"""
Unit tests for presigned URL generation.
"""
from datetime import timedelta

import pytest

from image_compressor.core.exceptions import InvalidUploadRequestError
from image_compressor.storage import KeyNamespace, PresignedURLGenerator
from tests.fakes import TEST_BUCKET


@pytest.fixture
def generator(blob_store, clock):
    return PresignedURLGenerator(blob_store, KeyNamespace(bucket_name=TEST_BUCKET), clock=clock)


@pytest.mark.unit
class TestPresignedURLGenerator:
    """Test presigned URL generation."""

    def test_download_url_defaults_to_five_minutes(self, generator):
        """Test the default download expiry."""
        presigned = generator.generate_download_url("compressed/1.png")

        assert presigned.method == "GET"
        assert presigned.expires_in_seconds == 300
        assert "X-Amz-Expires=300" in presigned.url
        assert presigned.expires_at - presigned.created_at == timedelta(seconds=300)
        assert not presigned.is_expired()

    def test_upload_url_uses_timestamped_key(self, generator):
        """Test upload URLs use a timestamped key."""
        presigned = generator.generate_upload_url("Cat Picture.JPG")

        assert presigned.method == "PUT"
        assert presigned.object_name == "uploads/1700000000000.jpg"
        assert "X-Amz-Method=PUT" in presigned.url

    def test_upload_url_rejects_name_without_extension(self, generator):
        """Test a file name without an extension is rejected."""
        with pytest.raises(InvalidUploadRequestError):
            generator.generate_upload_url("README")

    def test_custom_expiry(self, generator):
        """Test a custom expiry."""
        presigned = generator.generate_download_url("compressed/1.png", expires=timedelta(minutes=1))

        assert presigned.expires_in_seconds == 60

    def test_expiry_capped_at_seven_days(self, generator):
        """Test expiry is capped at seven days."""
        presigned = generator.generate_download_url("compressed/1.png", expires=timedelta(days=30))

        assert presigned.expires_in_seconds == 7 * 24 * 3600

    def test_to_dict(self, generator):
        """Test dictionary conversion."""
        data = generator.generate_download_url("compressed/1.png").to_dict()

        assert data["object_name"] == "compressed/1.png"
        assert data["method"] == "GET"
        assert "expires_at" in data
