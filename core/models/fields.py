"""
Record-store field names.

The tables and their columns are owned by the record store. Every field
name the service reads or writes is listed here, so a schema change touches
one module.
"""


class OrderFields:
    ORDER_NUMBER = "Order Number"
    CUSTOMER = "Customer"
    CUSTOMER_NAME = "Customer Name"
    CUSTOMER_EMAIL = "Customer Email"
    EXPECTED_ITEMS = "Package Items Included"
    ITEMS_RECEIVED = "Items Received"
    ITEMS_DIGITIZED = "Items Digitized"
    EXTRA_ITEMS = "Extra Items"
    EXTRA_CHARGE = "Extra Items Charge"
    STATUS = "Status"
    INVOICE_ID = "Extra Items Invoice ID"
    INVOICE_PAID = "Extra Items Paid"
    PAYMENT_DATE = "Extra Items Payment Date"
    ASSIGNED_EMPLOYEE = "Assigned Employee"
    COMPLETED_BY = "Completed By"
    DIGITIZATION_COMPLETE = "Digitization Complete"
    COMPLETION_DATE = "Completion Date"
    EMPLOYEE_PAY = "Employee Pay"
    PAY_PERIOD = "Pay Period"
    NOTES = "Notes"
    ORDER_ITEMS = "Order Items"
    TRACKING = ("Label 1 Tracking", "Label 2 Tracking", "Label 3 Tracking")


class EmployeeFields:
    NAME = "Name"
    ACTIVE = "Active"


class PayPeriodFields:
    NAME = "Name"
    STATUS = "Status"
    START_DATE = "Start Date"


class OrderItemFields:
    PRODUCT_NAME = "Product Name"
    QUANTITY = "Quantity"


class CustomerFields:
    NAME = "Name"
    CUSTOMER_NAME = "Customer Name"
