SYSTEM_ID = "legal_and_compliance"

NAME = "Legal & Compliance"

DISPLAY_NAME = "Legal & Compliance"

DESCRIPTION = "Automated compliance"

DIMENSIONS = [
    "Operational Efficiency",
    "Legal Consulting Cost Reduction",
    "Compliance and Risk Mitigation",
    "Certification and Audit Speed",
    "Talent Productivity and Utilization",
    "Quality, Security and Traceability",
]

TEMPLATE_FILE = "Plantilla_Legal_And_Compliance.txt"
