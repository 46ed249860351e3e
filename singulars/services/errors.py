GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again later."


class VoteServiceError(Exception):
    status_code = 500
    public_message = GENERIC_FAILURE_MESSAGE

    def __init__(self, message=None):
        self.message = message or self.public_message
        super().__init__(self.message)


class ValidationError(VoteServiceError):
    status_code = 400
    public_message = "Invalid request."


class NotFoundError(VoteServiceError):
    status_code = 404
    public_message = "Not found."


class RateLimitedError(VoteServiceError):
    status_code = 429
    public_message = "Rate limit exceeded. Please wait before voting again."

    def __init__(self, retry_after, message=None):
        self.retry_after = retry_after
        super().__init__(message)


class StoreUnavailableError(VoteServiceError):
    status_code = 503
    public_message = "Service temporarily unavailable. Please try again later."


class UnexpectedError(VoteServiceError):
    status_code = 500


class DuplicateVoteError(Exception):
    pass
