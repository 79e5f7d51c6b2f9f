"""
Configuration package for Study Copilot.

All values are exposed as module-level constants of
``study_copilot.config.settings``.
"""
