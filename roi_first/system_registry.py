"""System registry - loads ROI process metadata from the systems/ folder."""

import importlib
import logging
from pathlib import Path
from typing import Dict, List, Optional

from .config import SystemConfig


DEFAULT_TEMPLATE_FILE = "Plantilla_Legacy_TakeOver.txt"

REQUIRED_ATTRS = ("SYSTEM_ID", "NAME", "DISPLAY_NAME", "DIMENSIONS")


class SystemRegistry:
    """Static lookup table of ROI processes, keyed by system id."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.systems: Dict[str, SystemConfig] = {}

        self._load_systems()

    def _load_systems(self):
        """Load all system definitions from the systems/ folder."""
        systems_dir = Path(__file__).parent / "systems"

        for system_file in sorted(systems_dir.glob("*.py")):
            if system_file.name == "__init__.py":
                continue

            module_name = system_file.stem
            try:
                module = importlib.import_module(f"roi_first.systems.{module_name}")
            except ImportError as e:
                self.logger.error(f"Failed to import system {module_name}: {e}")
                continue

            missing = [attr for attr in REQUIRED_ATTRS if not hasattr(module, attr)]
            if missing:
                self.logger.error(f"System {module_name} missing required attribute(s): {', '.join(missing)}")
                continue

            config = SystemConfig(
                system_id=module.SYSTEM_ID,
                name=module.NAME,
                display_name=module.DISPLAY_NAME,
                description=getattr(module, "DESCRIPTION", ""),
                dimensions=list(module.DIMENSIONS),
                template_file=getattr(module, "TEMPLATE_FILE", ""),
                listed=getattr(module, "LISTED", True),
            )
            self.systems[config.system_id] = config
            self.logger.info(f"Registered system: {config.system_id}")

    def get_system(self, system_id: str) -> Optional[SystemConfig]:
        return self.systems.get(system_id)

    def list_systems(self, include_unlisted: bool = False) -> List[SystemConfig]:
        return [s for s in self.systems.values() if include_unlisted or s.listed]

    def display_name(self, system_id: str) -> str:
        """Display name for a system id; unknown ids are shown as-is."""
        config = self.systems.get(system_id)
        return config.display_name if config else system_id

    def template_file(self, system_id: str) -> str:
        """Data template for expert users, falling back to the Legacy Takeover one."""
        config = self.systems.get(system_id)
        if config and config.template_file:
            return config.template_file
        return DEFAULT_TEMPLATE_FILE

    @staticmethod
    def template_download_name(template_file: str) -> str:
        """Plantilla_Order_To_Cash.txt -> template_order_to_cash.txt"""
        stem = template_file.rsplit(".", 1)[0]
        if stem.startswith("Plantilla_"):
            stem = stem[len("Plantilla_"):]
        return f"template_{stem.lower()}.txt"
