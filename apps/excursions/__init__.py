"""Excursions app package.

Catalogue side of the platform consumed by the order engine: excursions,
their scheduled sessions (times) and meeting points with map locations.
The order engine only reads these records through ``selectors``.
"""
