from typing import Any

from fastapi import APIRouter

from .. import repo
from ..deps import failure_message
from ..schemas import ERROR_RESPONSES, MessageResponse

router = APIRouter(responses=ERROR_RESPONSES)


@router.get("/accounts")
def list_accounts() -> list[dict[str, Any]]:
    with failure_message("Failed to fetch accounts"):
        return repo.accounts.list_all()


@router.get("/accounts/{account_id}")
def get_account(account_id: str) -> dict[str, Any]:
    with failure_message("Failed to fetch account"):
        return repo.accounts.get(account_id)


@router.post("/accounts", status_code=201)
def create_account(payload: dict[str, Any]) -> dict[str, Any]:
    with failure_message("Failed to create account"):
        return repo.accounts.create(payload)


@router.put("/accounts/{account_id}")
def update_account(account_id: str, payload: dict[str, Any]) -> dict[str, Any]:
    with failure_message("Failed to update account"):
        return repo.accounts.update(account_id, payload)


@router.delete("/accounts/{account_id}", response_model=MessageResponse)
def delete_account(account_id: str) -> dict[str, str]:
    with failure_message("Failed to delete account"):
        repo.delete_account(account_id)
    return {"message": "Account deleted successfully"}


@router.get("/accounts/{account_id}/contacts")
def list_account_contacts(account_id: str) -> list[dict[str, Any]]:
    with failure_message("Failed to fetch contacts for account"):
        return repo.contacts.list_by_owner(account_id)


@router.get("/accounts/{account_id}/assessments")
def list_account_assessments(account_id: str) -> list[dict[str, Any]]:
    with failure_message("Failed to fetch assessments for account"):
        return repo.assessments.list_by_owner(account_id)
