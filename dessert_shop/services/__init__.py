"""Application services layer (catalog loading, session state).

Services coordinate work across the domain and infrastructure. They should
avoid UI concerns.
"""
