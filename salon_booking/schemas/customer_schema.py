"""Customer contact data models."""

from pydantic import BaseModel, ConfigDict


class ContactDetails(BaseModel):
    """Contact details submitted before confirmation.

    Instances are only built from values that already passed
    ``validate_contact_details``; the model itself does no format checks
    so the form can report every field error at once.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    email: str
    phone: str
