"""Pydantic models for the CalendAI website scanner.

Models serialize with camelCase keys to match what the booking frontend
expects from the scan endpoint.
"""

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    model_serializer,
)


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(word.capitalize() for word in components[1:])


class Branding(BaseModel):
    """Brand assets detected on a website.

    Attributes:
        logo_url: Absolute URL of the best logo candidate.
        primary_color: Primary brand colour as a hex code.
        secondary_color: Secondary/accent brand colour as a hex code.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    logo_url: str | None = None
    primary_color: str | None = Field(default=None, description="Hex colour, e.g. #1a73e8")
    secondary_color: str | None = Field(default=None, description="Hex colour, e.g. #333333")


class ScanResult(BaseModel):
    """Outcome of scanning a website for business and branding details.

    A scan never fails outright. Problems are reported through ``warning``:

    - URL rejected or host unreachable: every other field is None.
    - AI analysis failed: fields hold whatever raw page metadata was found.
    - Success: ``warning`` is None and the fields hold the AI analysis.

    Attributes:
        business_name: Name of the business or organisation.
        description: Short description of what the business does.
        suggested_event_description: Booking page copy for this business.
        branding: Logo and colours.
        warning: Human-readable explanation when the scan degraded.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        serialize_by_alias=True,
    )

    business_name: str | None = None
    description: str | None = None
    suggested_event_description: str | None = None
    branding: Branding = Field(default_factory=Branding)
    warning: str | None = None

    @model_serializer(mode="wrap")
    def serialize_without_empty_warning(self, handler: SerializerFunctionWrapHandler):
        """Leave ``warning`` out of the payload when the scan succeeded."""
        data = handler(self)
        if data.get("warning") is None:
            data.pop("warning", None)
        return data

    @classmethod
    def empty(cls, warning: str) -> "ScanResult":
        """Build a result with no content, only a warning."""
        return cls(warning=warning)
