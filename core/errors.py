# core/errors.py


class QueryFailure(Exception):
    """
    The record store failed while fetching or aggregating expenses.
    The router turns this into a generic user-facing message; details stay in the logs.
    """

    def __init__(self, message: str, *, user_id: str | None = None):
        super().__init__(message)
        self.user_id = user_id
