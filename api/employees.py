"""Employee routes: roster, work queue, pay summary."""

from fastapi import APIRouter, Query


def create_employees_router(services: dict) -> APIRouter:
    router = APIRouter(tags=["employees"])

    employee_svc = services["employee"]

    @router.get("/employees")
    def list_employees():
        employees = employee_svc.list_active()
        return {"employees": [{"id": e.id, "name": e.name} for e in employees]}

    @router.get("/employees/{employee_id}/work")
    def work_queue(employee_id: str, name: str | None = Query(None)):
        """Open orders assigned to the employee. `name` matches legacy name-string assignments."""
        orders = employee_svc.work_queue(employee_id, name)
        return {"orders": [o.to_response() for o in orders]}

    @router.get("/employees/{employee_id}/pay")
    def pay_summary(employee_id: str, name: str | None = Query(None)):
        return employee_svc.pay_summary(employee_id, name)

    return router
