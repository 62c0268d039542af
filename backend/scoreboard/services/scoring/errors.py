class ScoringError(Exception):
    """Base error for scoring operations, carrying the HTTP status to report."""

    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class ScoreValidationError(ScoringError):
    status_code = 400


class NotFoundError(ScoringError):
    status_code = 404


class MatchLockedError(ScoringError):
    status_code = 409


class ConsistencyError(ScoringError):
    """Stored state no hole sequence could produce; never corrected automatically."""

    status_code = 500


class MatchNotLockedError(ScoringError):
    status_code = 409
