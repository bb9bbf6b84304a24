"""Order to Cash - invoicing, collections and dispute handling."""

SYSTEM_ID = "order_to_cash"

NAME = "Order to Cash"

DISPLAY_NAME = "Agentic Order to Cash"

DESCRIPTION = "Streamline O2C"

DIMENSIONS = [
    "Savings in Collection Management Costs",
    "Reducing Errors in Billing and Processing",
    "Improved Collection Speed and DSO Reduction",
    "Optimizing Order Processing and Billing",
    "Reduction in Dispute Management and Reconciliation",
    "Improved Customer Experience and Retention",
]

TEMPLATE_FILE = "Plantilla_Order_To_Cash.txt"
