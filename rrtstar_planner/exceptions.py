class PlannerException(Exception):
    pass


class NoPathFoundError(PlannerException):
    def __init__(self, attempts: int, *args: object):
        super().__init__(
            "Failed to connect the goal to the tree after {} attempts".format(attempts),
            *args,
        )
        self.attempts = attempts


class PlanningTimeoutError(PlannerException):
    def __init__(self, elapsed: float, limit: float, *args: object):
        super().__init__(
            "Planning exceeded its time budget ({:.3f}s > {:.3f}s)".format(
                elapsed, limit
            ),
            *args,
        )
        self.elapsed = elapsed
        self.limit = limit


class PlannerNotConfiguredError(PlannerException):
    pass
