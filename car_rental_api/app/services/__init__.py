"""
Service layer.

Each service encapsulates the business logic of a domain and receives
its data-store models from the caller, so API handlers never depend on
how cars and rentals are stored.
"""
