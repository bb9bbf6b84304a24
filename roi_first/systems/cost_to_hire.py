"""Cost to Hire - recruiting pipeline from sourcing to offer."""

SYSTEM_ID = "cost_to_hire"

NAME = "Cost to Hire"

DISPLAY_NAME = "Cost to Hire"

DESCRIPTION = "Optimize hiring costs"

DIMENSIONS = [
    "Savings in Operational Work Costs",
    "Acceleration of Time to Hire",
    "Improvement in Hiring Quality",
    "Savings in External Hiring Costs",
    "Savings from Improved Candidate Experience",
    "Efficiency in Evaluation and Interviews",
]

TEMPLATE_FILE = "Plantilla_Cost_To_Hire.txt"
