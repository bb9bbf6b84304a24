"""
Systems package - each ROI process is a self-contained module.

To add a new process:
1. Create a new .py file in this folder (e.g., procurement.py)
2. Define these required attributes:
   - SYSTEM_ID: str (identifier sent to the remote services)
   - NAME: str (short name for the selection grid)
   - DISPLAY_NAME: str (name shown in chat and overview headers)
   - DIMENSIONS: list[str] (dimension labels of the process)
3. Optionally define DESCRIPTION, TEMPLATE_FILE and LISTED

The process will be automatically loaded by SystemRegistry.
"""
