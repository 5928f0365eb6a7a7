"""
Video-related data models for VidRelay.

This module contains Pydantic models for video metadata, download options
and the JSON envelopes returned by the API. Fields serialize in camelCase.
"""

from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import Any, Dict, List, Optional


class DownloadOption(BaseModel):
    """Model representing one download choice offered for a video."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Option identifier, matched against the download 'format' parameter")
    label: str = Field(..., description="Human-readable label")
    ext: str = Field(..., description="File extension (e.g., 'mp4', 'mp3')")
    quality: str = Field(..., description="Quality label (e.g., '720p', 'best', 'audio')")
    url: Optional[str] = Field(None, description="Resolved media URL, when the provider supplies one")
    has_audio: Optional[bool] = Field(None, alias="hasAudio", description="False for audio-only streams")


class VideoMetadata(BaseModel):
    """Model representing video metadata returned by a metadata provider."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Platform video identifier")
    title: str = Field(..., description="Video title")
    uploader: str = Field(..., description="Uploader or channel name")
    duration: str = Field("Unknown", description="Formatted duration (M:SS or H:MM:SS)")
    thumbnail: Optional[str] = Field(None, description="Thumbnail URL")
    description: str = Field("", description="Video description")
    view_count: Optional[int] = Field(None, alias="viewCount", description="View count, when known")
    upload_date: Optional[str] = Field(None, alias="uploadDate", description="Upload date, when known")
    options: List[DownloadOption] = Field(..., description="Available download options")
    platform: str = Field(..., description="Source platform")

    @field_validator('options')
    @classmethod
    def validate_options(cls, v):
        """At least one download option must be present."""
        if not v:
            raise ValueError('At least one download option must be available')
        return v

    def to_response(self) -> Dict[str, Any]:
        """Serialize with the camelCase field names clients expect."""
        return self.model_dump(by_alias=True)


class MetadataResponse(BaseModel):
    """Response model for the metadata endpoint."""

    success: bool = Field(True, description="Whether the request was successful")
    data: Dict[str, Any] = Field(..., description="Video metadata")


class HealthResponse(BaseModel):
    """Response model for the health endpoint."""

    success: bool = Field(True, description="Always true")
    message: str = Field(..., description="Status message")
    timestamp: str = Field(..., description="ISO-8601 server time")
    environment: str = Field(..., description="Deployment environment label")
    platforms: Dict[str, str] = Field(..., description="Per-platform download and metadata strategy")


class ErrorResponse(BaseModel):
    """Error response model."""

    success: bool = Field(False, description="Always false for errors")
    error: str = Field(..., description="Human-readable error message")
