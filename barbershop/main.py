import logging

from fastapi import FastAPI

from barbershop.api.v1.availability import router as availability_router
from barbershop.api.v1.booking_flows import router as booking_flows_router
from barbershop.api.v1.manage_flows import router as manage_flows_router
from barbershop.api.v1.reservations import router as reservations_router
from barbershop.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("reservation_id", "date", "time", "step", "recipient", "status", "reason", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title=f"{settings.BUSINESS_NAME} Booking", version="1.0.0")

app.include_router(availability_router, prefix="/api/v1", tags=["availability"])
app.include_router(booking_flows_router, prefix="/api/v1", tags=["booking"])
app.include_router(manage_flows_router, prefix="/api/v1", tags=["manage"])
app.include_router(reservations_router, prefix="/api/v1", tags=["reservations"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
