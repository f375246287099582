from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from contacts_api.utils.errors import ContactError

CONTACT_FIELDS = ("contact_name", "phone_number", "message", "image_url")


class ContactIn(BaseModel):
    """Request body for create and update. Unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore")

    contact_name: Optional[str] = None
    phone_number: Optional[str] = None
    message: Optional[str] = None
    image_url: Optional[str] = None

    def to_document(self) -> Dict[str, Optional[str]]:
        # All four keys are always written; absent ones become null
        return {field: getattr(self, field) for field in CONTACT_FIELDS}


def parse_contact_body(raw: Any, empty_message: str) -> ContactIn:
    """Turn a decoded JSON body into a ``ContactIn`` or raise BadRequest."""
    if not isinstance(raw, dict) or not raw:
        raise ContactError.bad_request(empty_message)

    try:
        return ContactIn.model_validate(raw)
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors())
        raise ContactError.bad_request(f"Bad request: invalid value for {fields}.")


def serialize_contact(doc: Dict[str, Any]) -> Dict[str, Any]:
    contact = dict(doc)
    if "_id" in contact:
        contact["_id"] = str(contact["_id"])
    return contact


def serialize_update_result(result) -> Dict[str, Any]:
    upserted_id = result.upserted_id
    return {
        "acknowledged": result.acknowledged,
        "matched_count": result.matched_count,
        "modified_count": result.modified_count,
        "upserted_id": str(upserted_id) if upserted_id is not None else None,
    }
