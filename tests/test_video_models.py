"""
Unit tests for video data models.

Tests for DownloadOption, VideoMetadata and the response envelopes.
"""

import pytest
from pydantic import ValidationError

from vidrelay.models.video import DownloadOption, ErrorResponse, MetadataResponse, VideoMetadata


class TestDownloadOption:
    """Test cases for DownloadOption model."""

    def test_minimal_option(self):
        """Test that url and hasAudio are optional."""
        option = DownloadOption(id="720p", label="720p HD", ext="mp4", quality="720p")

        assert option.url is None
        assert option.has_audio is None

    def test_populate_by_alias(self):
        """Test that the camelCase alias is accepted on input."""
        option = DownloadOption(id="audio", label="Audio", ext="mp3", quality="audio", hasAudio=False)
        assert option.has_audio is False

    def test_missing_required_field(self):
        with pytest.raises(ValidationError):
            DownloadOption(id="best", label="Best", ext="mp4")


class TestVideoMetadata:
    """Test cases for VideoMetadata model."""

    @pytest.fixture
    def option(self):
        return DownloadOption(id="best", label="Best Quality", ext="mp4", quality="best")

    def test_defaults(self, option):
        metadata = VideoMetadata(id="abc", title="Clip", uploader="Someone", options=[option], platform="YouTube")

        assert metadata.duration == "Unknown"
        assert metadata.thumbnail is None
        assert metadata.description == ""
        assert metadata.view_count is None
        assert metadata.upload_date is None

    def test_empty_options_rejected(self):
        """Test that a video must offer at least one download option."""
        with pytest.raises(ValidationError) as exc_info:
            VideoMetadata(id="abc", title="Clip", uploader="Someone", options=[], platform="YouTube")

        assert "At least one download option must be available" in str(exc_info.value)

    def test_to_response_uses_camel_case(self, option):
        metadata = VideoMetadata(
            id="abc", title="Clip", uploader="Someone", options=[option], platform="TikTok",
            view_count=42
        )

        data = metadata.to_response()

        assert data["viewCount"] == 42
        assert data["uploadDate"] is None
        assert "view_count" not in data
        assert data["options"][0]["hasAudio"] is None
        assert set(data) == {
            "id", "title", "uploader", "duration", "thumbnail", "description",
            "viewCount", "uploadDate", "options", "platform",
        }


class TestEnvelopes:
    """Test cases for the JSON envelopes."""

    def test_metadata_response(self):
        response = MetadataResponse(data={"id": "abc"})
        assert response.model_dump() == {"success": True, "data": {"id": "abc"}}

    def test_error_response(self):
        assert ErrorResponse(error="Nope").model_dump() == {"success": False, "error": "Nope"}
