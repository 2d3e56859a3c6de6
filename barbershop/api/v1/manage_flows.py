from __future__ import annotations

from typing import Callable

from fastapi import APIRouter, Depends, HTTPException

from barbershop.api.v1.schemas import (
    ChooseRequestSchema,
    LookupRequestSchema,
    ManageFlowResponseSchema,
    ReservationSchema,
    SelectDateRequestSchema,
    SelectTimeRequestSchema,
)
from barbershop.application.exceptions import InvalidTransition
from barbershop.application.ports.flow_store import FlowStorePort
from barbershop.application.use_cases.manage_booking import ManageBookingUseCase, ManageResult
from barbershop.domain.entities.manage_draft import ManageDraft
from barbershop.wiring.dependencies import get_flow_store, get_manage_use_case

router = APIRouter()


@router.post("/manage-flows", response_model=ManageFlowResponseSchema, status_code=201)
def start_manage(
    uc: ManageBookingUseCase = Depends(get_manage_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    result = uc.start()
    return _to_response(flows.create(result.draft), result)


@router.post("/manage-flows/{flow_id}/lookup", response_model=ManageFlowResponseSchema)
def lookup(
    flow_id: str,
    req: LookupRequestSchema,
    uc: ManageBookingUseCase = Depends(get_manage_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    return _advance(flow_id, flows, lambda draft: uc.lookup(draft, req.phone))


@router.post("/manage-flows/{flow_id}/choose", response_model=ManageFlowResponseSchema)
def choose(
    flow_id: str,
    req: ChooseRequestSchema,
    uc: ManageBookingUseCase = Depends(get_manage_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    return _advance(flow_id, flows, lambda draft: uc.choose(draft, req.reservation_id, req.action))


@router.post("/manage-flows/{flow_id}/date", response_model=ManageFlowResponseSchema)
def select_date(
    flow_id: str,
    req: SelectDateRequestSchema,
    uc: ManageBookingUseCase = Depends(get_manage_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    return _advance(flow_id, flows, lambda draft: uc.select_date(draft, req.date))


@router.post("/manage-flows/{flow_id}/time", response_model=ManageFlowResponseSchema)
def select_time(
    flow_id: str,
    req: SelectTimeRequestSchema,
    uc: ManageBookingUseCase = Depends(get_manage_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    return _advance(flow_id, flows, lambda draft: uc.select_time(draft, req.time))


@router.post("/manage-flows/{flow_id}/confirm", response_model=ManageFlowResponseSchema)
def confirm(
    flow_id: str,
    uc: ManageBookingUseCase = Depends(get_manage_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    return _advance(flow_id, flows, uc.confirm)


@router.post("/manage-flows/{flow_id}/back", response_model=ManageFlowResponseSchema)
def back(
    flow_id: str,
    uc: ManageBookingUseCase = Depends(get_manage_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    return _advance(flow_id, flows, uc.back)


@router.delete("/manage-flows/{flow_id}", response_model=ManageFlowResponseSchema)
def close(
    flow_id: str,
    uc: ManageBookingUseCase = Depends(get_manage_use_case),
    flows: FlowStorePort = Depends(get_flow_store),
):
    return _advance(flow_id, flows, uc.close)


def _advance(
    flow_id: str,
    flows: FlowStorePort,
    transition: Callable[[ManageDraft], ManageResult],
) -> ManageFlowResponseSchema:
    draft = flows.get(flow_id)
    if not isinstance(draft, ManageDraft):
        raise HTTPException(status_code=404, detail="Manage flow not found")
    try:
        result = transition(draft)
    except InvalidTransition as e:
        raise HTTPException(status_code=409, detail=str(e))

    if result.draft.step.is_terminal:
        flows.delete(flow_id)
    else:
        flows.save(flow_id, result.draft)
    return _to_response(flow_id, result)


def _schema(reservation) -> ReservationSchema | None:
    if reservation is None:
        return None
    return ReservationSchema.model_validate(reservation, from_attributes=True)


def _to_response(flow_id: str, result: ManageResult) -> ManageFlowResponseSchema:
    draft = result.draft
    return ManageFlowResponseSchema(
        flow_id=flow_id,
        step=draft.step,
        action=result.action,
        phone=draft.phone,
        reservations=[_schema(r) for r in draft.reservations],
        selected=_schema(draft.selected),
        date=draft.date,
        time=draft.time,
        slots=list(draft.offered_slots),
        message=result.message,
        error=result.error,
        reservation=_schema(result.reservation),
        calendar=result.calendar,
    )
