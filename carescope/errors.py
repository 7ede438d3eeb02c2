"""
CareScope Error Taxonomy
Validation, state and lookup failures raised by the domain engines
"""

from typing import List, Optional


class CareScopeError(Exception):
    """Base class for domain errors"""

    code = "carescope_error"

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])


class DelegationValidationError(CareScopeError):
    """
    One or more required inputs are missing or out of range.

    `errors` holds every violation found, in check order. Nothing is
    created or mutated when this is raised.
    """

    code = "validation_error"

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors) or "Validation failed", errors)


class DelegationStateError(CareScopeError):
    """Operation attempted on a rescinded delegation"""

    code = "state_error"

    def __init__(self, delegation_id: str, operation: str):
        super().__init__(f"Delegation {delegation_id} is rescinded; cannot {operation}")
        self.delegation_id = delegation_id
        self.operation = operation


class NotFoundError(CareScopeError):
    """Unknown identifier"""

    code = "not_found"

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id
