"""Backend operations for the catalog client.

Each module provides async functions that wrap one group of REST endpoints.
Services accept a ``CatalogClient`` as their first parameter and return
validated schemas from ``trackml.catalog.models``.  They raise
``trackml.catalog.errors`` exceptions and never touch view state -- that is
the views' responsibility.
"""
