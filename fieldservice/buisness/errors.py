"""
Business error taxonomy.

Every error carries the HTTP status the presentation layer answers with.
Validation, not-found and conflict errors are expected and their message is
shown to the user; StorageError hides the underlying driver error.
"""


class FieldServiceError(Exception):
    """Base class for all expected business errors"""

    status_code = 500
    default_message = 'Request failed'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'success': False, 'error': self.message, 'error_type': type(self).__name__}


class ValidationError(FieldServiceError, ValueError):
    status_code = 400
    default_message = 'Invalid input'


class InvalidQuantityError(ValidationError):
    default_message = 'Quantity must be a positive integer'


class NotFoundError(FieldServiceError):
    status_code = 404
    default_message = 'Not found'


class EquipmentNotFoundError(NotFoundError):
    def __init__(self, equipment_id):
        super().__init__(f"Equipment {equipment_id} not found")
        self.equipment_id = equipment_id


class PartNotFoundError(NotFoundError):
    def __init__(self, part_id):
        super().__init__(f"Part {part_id} not found")
        self.part_id = part_id


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id):
        super().__init__(f"Service order {order_id} not found")
        self.order_id = order_id


class ConflictError(FieldServiceError):
    status_code = 409
    default_message = 'Conflict with current state'


class InsufficientStockError(ConflictError):
    def __init__(self, part_id, requested, available):
        super().__init__(
            f"Insufficient stock for part {part_id}: requested {requested}, available {available}"
        )
        self.part_id = part_id
        self.requested = requested
        self.available = available

    def to_dict(self):
        data = super().to_dict()
        data.update({'requested': self.requested, 'available': self.available})
        return data


class InvalidTransitionError(ConflictError):
    def __init__(self, current, target):
        super().__init__(f"Cannot move service order from '{current}' to '{target}'")
        self.current = current
        self.target = target


class AlreadyClosedError(ConflictError):
    def __init__(self, order_id=None):
        if order_id is None:
            super().__init__("Service order is already closed")
        else:
            super().__init__(f"Service order {order_id} is already closed")
        self.order_id = order_id


class StorageError(FieldServiceError):
    status_code = 500
    default_message = 'A storage error occurred'

    def to_dict(self):
        # Never expose driver details to the caller
        return {'success': False, 'error': self.default_message, 'error_type': 'StorageError'}
