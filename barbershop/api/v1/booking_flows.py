from __future__ import annotations

import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException

from barbershop.api.v1.schemas import (
    BookingFlowResponseSchema,
    DetailsRequestSchema,
    ReservationSchema,
    SelectDateRequestSchema,
    SelectTimeRequestSchema,
)
from barbershop.application.exceptions import InvalidTransition
from barbershop.application.ports.flow_store import FlowStorePort
from barbershop.application.use_cases.booking import BookingFlowUseCase, BookingResult
from barbershop.domain.entities.booking_draft import BookingDraft
from barbershop.wiring.dependencies import get_booking_use_case, get_flow_store

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/booking-flows", response_model=BookingFlowResponseSchema, status_code=201)
def start_booking(
    uc: BookingFlowUseCase = Depends(get_booking_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    result = uc.start()
    return _to_response(flows.create(result.draft), result)


@router.post("/booking-flows/{flow_id}/date", response_model=BookingFlowResponseSchema)
def select_date(
    flow_id: str,
    req: SelectDateRequestSchema,
    uc: BookingFlowUseCase = Depends(get_booking_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    return _advance(flow_id, flows, lambda draft: uc.select_date(draft, req.date))


@router.post("/booking-flows/{flow_id}/time", response_model=BookingFlowResponseSchema)
def select_time(
    flow_id: str,
    req: SelectTimeRequestSchema,
    uc: BookingFlowUseCase = Depends(get_booking_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    return _advance(flow_id, flows, lambda draft: uc.select_time(draft, req.time))


@router.post("/booking-flows/{flow_id}/details", response_model=BookingFlowResponseSchema)
def submit_details(
    flow_id: str,
    req: DetailsRequestSchema,
    uc: BookingFlowUseCase = Depends(get_booking_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    return _advance(flow_id, flows, lambda draft: uc.submit_details(draft, req.name, req.email, req.phone))


@router.post("/booking-flows/{flow_id}/confirm", response_model=BookingFlowResponseSchema)
def confirm(
    flow_id: str,
    uc: BookingFlowUseCase = Depends(get_booking_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    return _advance(flow_id, flows, uc.confirm)


@router.post("/booking-flows/{flow_id}/back", response_model=BookingFlowResponseSchema)
def back(
    flow_id: str,
    uc: BookingFlowUseCase = Depends(get_booking_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    return _advance(flow_id, flows, uc.back)


@router.delete("/booking-flows/{flow_id}", response_model=BookingFlowResponseSchema)
def cancel(
    flow_id: str,
    uc: BookingFlowUseCase = Depends(get_booking_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    return _advance(flow_id, flows, uc.cancel)


def _advance(
    flow_id: str,
    flows: FlowStorePort,
    transition: Callable[[BookingDraft], BookingResult],
) -> BookingFlowResponseSchema:
    draft = flows.get(flow_id)
    if not isinstance(draft, BookingDraft):
        raise HTTPException(status_code=404, detail="Booking flow not found")
    try:
        result = transition(draft)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))

    if result.draft.step.is_terminal:
        flows.delete(flow_id)
    else:
        flows.save(flow_id, result.draft)
    if result.error:
        logger.info("Booking step rejected", extra={"step": result.draft.step.value, "reason": result.error})
    return _to_response(flow_id, result)


def _to_response(flow_id: str, result: BookingResult) -> BookingFlowResponseSchema:
    draft = result.draft
    return BookingFlowResponseSchema(
        flow_id=flow_id,
        step=draft.step,
        action=result.action,
        date=draft.date,
        time=draft.time,
        name=draft.name,
        email=draft.email,
        phone=draft.phone,
        slots=list(draft.offered_slots),
        message=result.message,
        error=result.error,
        fields=list(result.fields),
        reservation=(
            ReservationSchema.model_validate(result.reservation, from_attributes=True)
            if result.reservation else None
        ),
        calendar=result.calendar,
        notified=result.notified,
    )
