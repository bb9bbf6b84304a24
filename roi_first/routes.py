"""Front-end routes the API hands back when the flow moves to another screen."""

SELECTION_ROUTE = "/roi-business-case"


def overview_route(system_id: str) -> str:
    return f"{SELECTION_ROUTE}/{system_id}/overview"


def agent_selection_route(system_id: str) -> str:
    return f"{SELECTION_ROUTE}/{system_id}/select-agent"


def chat_route(system_id: str) -> str:
    return f"{SELECTION_ROUTE}/{system_id}/chat"
