from typing import Any

from fastapi import APIRouter

from .. import repo
from ..deps import failure_message
from ..schemas import ERROR_RESPONSES, MessageResponse

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/contacts")
def list_contacts() -> list[dict[str, Any]]:
    with failure_message("Failed to fetch contacts"):
        return repo.contacts.list_all()


@router.get("/contacts/{contact_id}")
def get_contact(contact_id: str) -> dict[str, Any]:
    with failure_message("Failed to fetch contact"):
        return repo.contacts.get(contact_id)


@router.post("/contacts", status_code=201)
def create_contact(payload: dict[str, Any]) -> dict[str, Any]:
    with failure_message("Failed to create contact"):
        return repo.contacts.create(payload)


@router.put("/contacts/{contact_id}")
def update_contact(contact_id: str, payload: dict[str, Any]) -> dict[str, Any]:
    with failure_message("Failed to update contact"):
        return repo.contacts.update(contact_id, payload)


@router.delete("/contacts/{contact_id}", response_model=MessageResponse)
def delete_contact(contact_id: str) -> dict[str, str]:
    with failure_message("Failed to delete contact"):
        repo.contacts.delete(contact_id)
    return {"message": "Contact deleted successfully"}
