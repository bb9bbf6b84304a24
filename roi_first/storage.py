"""Session-scoped key/value storage for the small ROI settings.

Each browsing session owns one store. Keys mirror what the front-end keeps
between screens: the selected system, agent mode, company profile,
dimension labels, the collected data blob and the calculation result.
Every key can be cleared on its own.
"""

import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .schemas import AgentMode, CalculationResult, CompanyProfile


ROI_SYSTEM_KEY = "roiSystem"
ROI_TYPE_KEY = "roiType"
COMPANY_INFO_KEY = "companyInfo"
ROI_DIMENSIONS_KEY = "roiDimensions"
COLLECTED_DATA_KEY = "collectedData"
CALCULATION_DATA_KEY = "calculationData"

# Everything tied to the current business case except the calculation result
ROI_SESSION_KEYS = (
    ROI_SYSTEM_KEY,
    ROI_TYPE_KEY,
    COMPANY_INFO_KEY,
    ROI_DIMENSIONS_KEY,
    COLLECTED_DATA_KEY,
)


class KeyValueStore(ABC):
    """Minimal get/set/delete/clear contract the conversation core relies on."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store; values are deep-copied on the way in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> List[str]:
        return list(self._data)


# ---------------------------------------------------------------------------
# Typed accessors
# ---------------------------------------------------------------------------


def get_roi_system(store: KeyValueStore) -> Optional[str]:
    return store.get(ROI_SYSTEM_KEY)


def set_roi_system(store: KeyValueStore, system_id: str) -> None:
    store.set(ROI_SYSTEM_KEY, system_id)


def get_agent_mode(store: KeyValueStore) -> Optional[AgentMode]:
    value = store.get(ROI_TYPE_KEY)
    if value is None:
        return None
    try:
        return AgentMode(value)
    except ValueError:
        return None


def set_agent_mode(store: KeyValueStore, mode: AgentMode) -> None:
    store.set(ROI_TYPE_KEY, mode.value)


def get_company_profile(store: KeyValueStore) -> Optional[CompanyProfile]:
    value = store.get(COMPANY_INFO_KEY)
    if value is None:
        return None
    return CompanyProfile.model_validate(value)


def set_company_profile(store: KeyValueStore, profile: CompanyProfile) -> None:
    store.set(COMPANY_INFO_KEY, profile.model_dump())


def get_roi_dimensions(store: KeyValueStore) -> List[str]:
    return store.get(ROI_DIMENSIONS_KEY) or []


def set_roi_dimensions(store: KeyValueStore, dimensions: List[str]) -> None:
    store.set(ROI_DIMENSIONS_KEY, list(dimensions))


def set_collected_data(store: KeyValueStore, data: Any) -> None:
    store.set(COLLECTED_DATA_KEY, data)


def clear_collected_data(store: KeyValueStore) -> None:
    store.delete(COLLECTED_DATA_KEY)


def get_calculation_data(store: KeyValueStore) -> Optional[CalculationResult]:
    value = store.get(CALCULATION_DATA_KEY)
    if value is None:
        return None
    return CalculationResult.model_validate(value)


def set_calculation_data(store: KeyValueStore, result: CalculationResult) -> None:
    store.set(CALCULATION_DATA_KEY, result.model_dump())


def clear_calculation_data(store: KeyValueStore) -> None:
    store.delete(CALCULATION_DATA_KEY)


def clear_roi_session(store: KeyValueStore) -> None:
    for key in ROI_SESSION_KEYS:
        store.delete(key)
