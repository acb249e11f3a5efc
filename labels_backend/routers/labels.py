"""
Label Endpoints

POST   /api/customers/{customer_id}/labels             - create a label
GET    /api/customers/{customer_id}/labels/{label_id}  - fetch one label
PATCH  /api/customers/{customer_id}/labels/{label_id}  - rename / recolor
DELETE /api/customers/{customer_id}/labels/{label_id}  - delete, detaching it everywhere
POST   /api/customers/{customer_id}/labels/assign      - add/remove labels on objects

The requester e-mail comes from the ``config.REQUESTER_HEADER`` header.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from labels_backend import config
from labels_backend.api.schemas import AssignLabelsBody, CreateLabelBody, UpdateLabelBody
from labels_backend.domain.errors import InvalidLabelIDError, InvalidUserError
from labels_backend.service.labels import LabelsService, get_labels_service

router = APIRouter(prefix="/api/customers/{customer_id}/labels", tags=["labels"])


def _requester(request: Request) -> Optional[str]:
    email = request.headers.get(config.REQUESTER_HEADER, "").strip()
    return email or None


@router.post("", status_code=201)
async def create_label(
    customer_id: str,
    body: CreateLabelBody,
    request: Request,
    service: LabelsService = Depends(get_labels_service),
):
    """Create an empty label for the customer."""
    req = body.to_request(customer_id, _requester(request))
    label = await asyncio.to_thread(service.create_label, req)
    return label.to_dict()


@router.post("/assign")
async def assign_labels(
    customer_id: str,
    body: AssignLabelsBody,
    request: Request,
    service: LabelsService = Depends(get_labels_service),
):
    """Attach and detach labels on a set of objects in one batch."""
    req = body.to_request(customer_id)
    requester = _requester(request)
    if requester is None:
        raise InvalidUserError()

    await asyncio.to_thread(service.assign_labels, req, requester)
    return {"status": "ok"}


@router.get("/{label_id}")
async def get_label(
    customer_id: str,
    label_id: str,
    service: LabelsService = Depends(get_labels_service),
):
    label = await asyncio.to_thread(service.get_label, label_id)
    return label.to_dict()


@router.patch("/{label_id}")
async def update_label(
    customer_id: str,
    label_id: str,
    body: UpdateLabelBody,
    service: LabelsService = Depends(get_labels_service),
):
    """Apply only the provided fields."""
    req = body.to_request(label_id)
    label = await asyncio.to_thread(service.update_label, req)
    return label.to_dict()


@router.delete("/{label_id}", status_code=204)
async def delete_label(
    customer_id: str,
    label_id: str,
    service: LabelsService = Depends(get_labels_service),
):
    if not label_id.strip():
        raise InvalidLabelIDError()
    await asyncio.to_thread(service.delete_label, label_id)
    return Response(status_code=204)
