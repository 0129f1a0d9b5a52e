"""Order routes: tracking lookup, check-in, notes, completion."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from core.models import OrderFields


class CheckInRequest(BaseModel):
    items_received: int = Field(..., alias="itemsReceived", ge=0)
    employee_id: str = Field(..., alias="employeeId", min_length=1)
    employee_name: str | None = Field(None, alias="employeeName")
    notes: str | None = Field(None, max_length=10000)

    model_config = {"populate_by_name": True}


class NotesUpdate(BaseModel):
    notes: str | None = Field(None, max_length=10000)


class CompleteRequest(BaseModel):
    items_digitized: int = Field(..., alias="itemsDigitized", ge=0)
    employee_id: str | None = Field(None, alias="employeeId")

    model_config = {"populate_by_name": True}


def create_orders_router(services: dict) -> APIRouter:
    router = APIRouter(tags=["orders"])

    tracking_svc = services["tracking"]
    checkin_svc = services["checkin"]
    completion_svc = services["completion"]
    order_svc = services["order"]

    @router.get("/orders/tracking/{tracking_number}")
    def lookup_by_tracking(tracking_number: str):
        """Find the order for a scanned tracking number or its last few digits."""
        return tracking_svc.resolve(tracking_number)

    @router.post("/orders/{order_id}/checkin")
    def check_in(order_id: str, body: CheckInRequest):
        """Record received items, bill overage, assign the order to the employee."""
        result = checkin_svc.check_in(
            order_id,
            items_received=body.items_received,
            employee_id=body.employee_id,
            employee_name=body.employee_name,
            notes=body.notes,
        )
        return {
            "success": True,
            "order": result.order.to_response(),
            "invoice": result.invoice.to_response() if result.invoice else None,
        }

    @router.patch("/orders/{order_id}/notes")
    def update_notes(order_id: str, body: NotesUpdate):
        order = order_svc.update_notes(order_id, body.notes)
        return {"success": True, "notes": order.fields.get(OrderFields.NOTES, "")}

    @router.post("/orders/{order_id}/complete")
    def complete(order_id: str, body: CompleteRequest):
        """Mark an order digitized and report the employee's pay for it."""
        result = completion_svc.complete(
            order_id,
            items_digitized=body.items_digitized,
            employee_id=body.employee_id,
        )
        return {
            "success": True,
            "order": result.order.to_response(),
            "pay": result.pay.to_response(),
        }

    return router
