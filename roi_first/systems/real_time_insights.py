SYSTEM_ID = "real_time_insights"

NAME = "Real Time Insights"

DISPLAY_NAME = "Real Time Insights"

DESCRIPTION = "Real-time business insights"

DIMENSIONS = [
    "Operation and Maintenance Cost (O&M)",
    "Labor Costs",
    "Inventory Loss Cost (Shrinkage)",
    "Technology and IT Support Cost",
    "Supply Chain and Logistics Cost",
    "Financial Friction and Insurance Cost",
]

TEMPLATE_FILE = "Plantilla_Real_Time_Insights.txt"
