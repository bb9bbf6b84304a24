"""Customer Support - case handling costs of an IT / customer help desk."""

SYSTEM_ID = "customer_support"

NAME = "Customer Support"

DISPLAY_NAME = "Agentic Customer Support"

DESCRIPTION = "AI-powered support"

DIMENSIONS = [
    "Cost for Delay in Case Handling",
    "Cost for Case Recurrence",
    "Operational Cost",
    "Cost for Poor Quality",
]

TEMPLATE_FILE = "Plantilla_Customer_Support.txt"
