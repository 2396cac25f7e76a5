"""Value models for mailboxes, SMTP endpoints and alert targets."""

from email.headerregistry import Address
from typing import Optional, Tuple

from pydantic import BaseModel, Field


class MailboxIdentity(BaseModel):
    """A display name paired with a mailbox address."""

    name: str = Field("", description="Display name, may be empty")
    address: str = Field(..., min_length=1, description="addr-spec, e.g. ayd@localhost")

    model_config = {"frozen": True}

    def to_header_address(self) -> Address:
        """Convert to an Address usable in EmailMessage headers."""
        return Address(display_name=self.name, addr_spec=self.address)

    def __str__(self) -> str:
        return str(self.to_header_address())


class Endpoint(BaseModel):
    """SMTP server location and TLS policy."""

    host: str = Field(..., min_length=1)
    port: int = Field(..., ge=1, le=65535)
    secure: bool = True

    model_config = {"frozen": True}


class AlertTarget(BaseModel):
    """Decomposed alert-channel URL.

    Attributes:
        scheme: Channel kind (always ``mailto`` for this plugin)
        opaque: Recipient part exactly as written in the URL
        recipients: Parsed recipients, in URL order
        override_from: Sender from the ``from`` query parameter, if any
    """

    scheme: str
    opaque: str
    recipients: Tuple[MailboxIdentity, ...] = Field(..., min_length=1)
    override_from: Optional[MailboxIdentity] = None

    model_config = {"frozen": True}
