SYSTEM_ID = "web-takeover"

NAME = "Web Interface Takeover"

DISPLAY_NAME = "Web Interface Takeover"

DIMENSIONS = [
    "Task Completion Rate",
    "Speed Improvement",
    "Error Reduction",
    "User Experience",
    "Integration Complexity",
    "Maintenance Effort",
]

LISTED = False
