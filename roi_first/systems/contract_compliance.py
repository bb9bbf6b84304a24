"""Contract Management Compliance - reachable by id, not shown on the selection grid."""

SYSTEM_ID = "compliance"

NAME = "Contract Management Compliance"

DISPLAY_NAME = "Contract Management Compliance"

DIMENSIONS = [
    "Compliance Rate",
    "Risk Reduction",
    "Audit Efficiency",
    "Contract Accuracy",
    "Process Speed",
    "Cost Savings",
]

LISTED = False
