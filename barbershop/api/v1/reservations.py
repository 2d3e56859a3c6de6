from fastapi import APIRouter, Depends, HTTPException, Response

from barbershop.application.exceptions import StoreUnavailable
from barbershop.application.ports.calendar_export import CalendarExportPort
from barbershop.application.ports.reservation_store import ReservationStorePort
from barbershop.wiring.dependencies import get_calendar_export, get_reservation_store

router = APIRouter()


@router.get("/reservations/{reservation_id}/calendar.ics")
def reservation_calendar(
    reservation_id: str,
    with_reminder: bool = True,
    store: ReservationStorePort = Depends(get_reservation_store),
    export: CalendarExportPort = Depends(get_calendar_export),
) -> Response:
    try:
        reservation = store.get(reservation_id)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    if reservation is None:
        raise HTTPException(status_code=404, detail="Reservation not found")

    return Response(
        content=export.build(reservation, with_reminder=with_reminder),
        media_type=export.media_type,
        headers={"Content-Disposition": 'attachment; filename="appointment.ics"'},
    )
