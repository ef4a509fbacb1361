"""
PySide6 authoring GUI.
"""
