# Path: core/__init__.py
# Purpose: Package initializer for core application layer.
# Layer: core.
# Details: Aggregates subpackages for settings validation, retrieval, correction, history, views, and persistence.
