SYSTEM_ID = "physical-ai"

NAME = "Physical AI"

DISPLAY_NAME = "Physical AI"

DIMENSIONS = [
    "Automation Level",
    "Safety Score",
    "Efficiency Gain",
    "Downtime Reduction",
    "Quality Improvement",
    "Maintenance Cost",
]

LISTED = False
