"""Error conditions raised by the timeline engine."""


class TimelineError(ValueError):
    """Base class for timeline engine errors."""


class InvalidConfiguration(TimelineError):
    """A view or ruler setting is unusable (bad interval, zoom, orientation...)."""


class MissingTemporalDescriptor(TimelineError):
    """An event carries neither a start time nor a time offset."""

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(f"Event {event_id} has neither startTime nor timeOffset")


class UnknownEventError(TimelineError):
    """An operation referenced an event id the view does not hold."""

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(f"Unknown event id: {event_id}")
