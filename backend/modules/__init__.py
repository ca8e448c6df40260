"""
Feature modules for the Storefy client core.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's collaborators
- models.py: Pydantic models for resolved state
- service.py / resolver.py: Implementation
- exceptions.py: Module-specific exceptions

Modules communicate through interfaces, not concrete implementations.
Wiring lives in client/dependencies.py.
"""
