class SalonError(Exception):
    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(SalonError):
    """Datos de entrada inválidos o referencias que no existen."""

    def __init__(self, reason, message):
        super().__init__(message, 400)
        self.reason = reason


class PersistenceError(SalonError):
    status_code = 500


class ConflictError(SalonError):
    status_code = 409

    def __init__(self, message, appointment=None):
        super().__init__(message, 409)
        self.appointment = appointment
