import json
import logging

from fastapi import APIRouter, Depends, Request, status
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo.errors import DuplicateKeyError

from contacts_api.db.mongo import get_contacts_collection
from contacts_api.models.contact import (
    parse_contact_body,
    serialize_contact,
    serialize_update_result,
)
from contacts_api.utils.errors import ContactError

logger = logging.getLogger(__name__)

router = APIRouter()


def _is_json(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";")[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


async def _read_json(request: Request):
    # Bodies sent with any other content type are not parsed
    if not _is_json(request):
        return None
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        # Undecodable bodies are treated the same as missing ones
        return None


# ✅ List contacts
@router.get("/contacts")
async def list_contacts(
    request: Request,
    collection: AsyncIOMotorCollection = Depends(get_contacts_collection),
):
    limit = request.app.state.settings.list_limit
    try:
        results = await collection.find({}).limit(limit).to_list(length=limit)
    except Exception as e:
        logger.exception("Error in GET /contacts")
        raise ContactError.internal("list contacts", e)

    logger.debug("Listed %d contacts", len(results))
    return [serialize_contact(doc) for doc in results]


# ✅ Create a contact
@router.post("/contacts", status_code=status.HTTP_201_CREATED)
async def create_contact(
    request: Request,
    collection: AsyncIOMotorCollection = Depends(get_contacts_collection),
):
    contact = parse_contact_body(
        await _read_json(request), "Bad request: No data provided."
    )
    name = contact.contact_name

    try:
        existing_contact = await collection.find_one({"contact_name": name})
        if existing_contact:
            raise ContactError.conflict(name)

        new_document = contact.to_document()
        logger.info("Inserting contact %s", new_document)
        result = await collection.insert_one(new_document)
        logger.info("Document inserted: %s", result.inserted_id)
    except ContactError:
        raise
    except DuplicateKeyError:
        # Lost a race with a concurrent create; the unique index caught it
        raise ContactError.conflict(name)
    except Exception as e:
        logger.exception("Error in POST /contacts")
        raise ContactError.internal("add contact", e)

    return {"message": "New contact added successfully"}


# ✅ Update a contact, located by its current name
@router.put("/contacts/{name}")
async def update_contact(
    name: str,
    request: Request,
    collection: AsyncIOMotorCollection = Depends(get_contacts_collection),
):
    contact = parse_contact_body(
        await _read_json(request), "Bad request: No data provided for update."
    )
    logger.info("Contact to update: %s", name)

    try:
        result = await collection.update_one(
            {"contact_name": name},
            {"$set": contact.to_document()},
        )
    except DuplicateKeyError:
        # Renaming onto a name that is already taken
        raise ContactError.conflict(contact.contact_name)
    except Exception as e:
        logger.exception("Error in PUT /contacts/%s", name)
        raise ContactError.internal("update contact", e)

    if result.matched_count == 0:
        raise ContactError.not_found(name)

    return {
        "message": f"Contact '{name}' updated successfully.",
        "result": serialize_update_result(result),
    }


# ✅ Delete a contact
@router.delete("/contacts/{name}")
async def delete_contact(
    name: str,
    collection: AsyncIOMotorCollection = Depends(get_contacts_collection),
):
    logger.info("Contact to delete: %s", name)
    query = {"contact_name": name}

    try:
        existing_contact = await collection.find_one(query)
        if not existing_contact:
            raise ContactError.not_found(name)

        result = await collection.delete_one(query)
        logger.info("Deleted %d document(s) for %s", result.deleted_count, name)
    except ContactError:
        raise
    except Exception as e:
        logger.exception("Error in DELETE /contacts/%s", name)
        raise ContactError.internal("delete contact", e)

    return {"message": f"Contact {name} was DELETED successfully."}
