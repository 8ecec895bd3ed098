"""Domain layer (desserts, cart, catalog errors).

Domain modules should not depend on UI. Catalog sources are injected into the
services layer as passed-in clients.
"""
