"""Invoice routes."""

from fastapi import APIRouter


def create_invoices_router(services: dict) -> APIRouter:
    router = APIRouter(tags=["invoices"])

    invoice_svc = services["invoice"]

    @router.get("/invoices/{invoice_id}/status")
    def invoice_status(invoice_id: str):
        """Payment status of an overage invoice, amounts in dollars."""
        return invoice_svc.get_status(invoice_id).model_dump(mode="json")

    return router
