"""Consent handling configuration models."""

from typing import Literal

from pydantic import BaseModel, Field


class DateFormatConfig(BaseModel):
    """Wire date format for consent maps."""

    kind: Literal["iso8601"] = Field(
        default="iso8601",
        description="Date format implementation",
    )
    timespec: Literal["auto", "seconds", "milliseconds", "microseconds"] = Field(
        default="auto",
        description="Precision of formatted dates; auto is lossless",
    )


class ConsentConfig(BaseModel):
    """Consent handling configuration."""

    date_format: DateFormatConfig = Field(default_factory=DateFormatConfig)
