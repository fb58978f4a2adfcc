"""Pydantic models for the content exchanged with the model provider.

A generation request is an ordered list of parts.  A part is either plain
text or an inline binary blob (MIME type plus base64 payload).  Field
aliases follow the provider's REST wire format, so requests are serialised
with ``model_dump(by_alias=True)``::

    [
        {"text": "Describe the image in detail."},
        {"inlineData": {"mimeType": "image/png", "data": "iVBORw0KGgo..."}},
    ]
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TextPart(BaseModel):
    """A plain text fragment of a generation request."""

    text: str


class InlineData(BaseModel):
    """Base64 payload together with its declared MIME type."""

    model_config = ConfigDict(populate_by_name=True)

    mime_type: str = Field(..., alias="mimeType")
    data: str = Field(..., description="Standard base64 encoding of the file bytes.")


class InlineDataPart(BaseModel):
    """A binary fragment of a generation request."""

    model_config = ConfigDict(populate_by_name=True)

    inline_data: InlineData = Field(..., alias="inlineData")


GenerativeRequestPart = TextPart | InlineDataPart


class ModelInvocationResult(BaseModel):
    """The only datum kept from a provider response."""

    output_text: str
