"""Customer Support Automation.

Dimensions are defined by the calculation service for this process, so
the overview starts without a fixed list.
"""

SYSTEM_ID = "customer_support_automation"

NAME = "Customer Support Automation"

DISPLAY_NAME = "Customer Support Automation"

DESCRIPTION = "Automate support operations"

DIMENSIONS = []

TEMPLATE_FILE = "Plantilla_Customer_Support_Automation.txt"
