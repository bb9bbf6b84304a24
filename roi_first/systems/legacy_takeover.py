"""Legacy Takeover - modernization of legacy systems.

Its template is also the fallback for processes without one.
"""

SYSTEM_ID = "legacy_takeover"

NAME = "Legacy Takeover"

DISPLAY_NAME = "Legacy Takeover"

DESCRIPTION = "Modernize legacy systems"

DIMENSIONS = [
    "Development and Maintenance Efficiency",
    "Software Quality",
    "Delivery Speed",
    "Operational Costs",
    "Satisfaction and Value",
    "Innovation and Scalability",
]

TEMPLATE_FILE = "Plantilla_Legacy_TakeOver.txt"
