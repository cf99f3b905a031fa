class OrderError(Exception):
    """Base error for order actions; carries the HTTP status to answer with."""

    status_code = 400

    def __init__(self, message, *, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class OrderNotFound(OrderError):
    status_code = 404


class SubmissionNotFound(OrderError):
    status_code = 404


class InvalidTransition(OrderError):
    """The order (or submission) is not in a state that allows the action."""

    def __init__(self, message, *, current_status=None, requested_status=None):
        super().__init__(message)
        self.current_status = current_status
        self.requested_status = requested_status


class AssignmentConflict(OrderError):
    """The order already belongs to another supplier."""
    status_code = 409


class FanoutConflict(OrderError):
    """The order can't be broadcast: directly assigned or already broadcast."""
    status_code = 409


class ExecutionDetailsError(OrderError):
    """Driver or vehicle missing, inactive or owned by someone else."""
    status_code = 400
