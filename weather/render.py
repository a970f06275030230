from abc import ABC, abstractmethod

ELEMENT_IDS = {
    "temperatureValue": "temperature-value",
    "description": "description",
    "humidity": "humidity",
    "windSpeed": "wind-speed",
    "location": "location-div",
    "windUnit": "wind-speed-unit",
    "searchInput": "search-location-input",
    "fahrenheit": "fahrenheit",
    "celsius": "celsius",
    "dateTime": "current-date-time",
    "currentLocation": "current-location-button",
    "weatherIcon": "weather-icon",
}

DAY_CARD_IDS = (
    "tomorrow-card",
    "day-three-card",
    "day-four-card",
    "day-five-card",
    "day-six-card",
)


class RenderPort(ABC):
    """Where the widget writes its output. Keys are ELEMENT_IDS keys."""

    @abstractmethod
    def reset(self):
        ...

    @abstractmethod
    def write(self, key, value):
        ...

    @abstractmethod
    def set_icon(self, url, alt):
        ...

    @abstractmethod
    def set_unit(self, active, inactive):
        ...

    @abstractmethod
    def write_days(self, cards):
        ...

    @abstractmethod
    def set_unavailable(self, reason):
        ...


class PageRenderer(RenderPort):
    """
    Collects the widget output into a page-state dict keyed by element id.
    The same state feeds the HTML template and the JSON endpoint.
    """

    def __init__(self, element_ids: dict = None, day_card_ids=DAY_CARD_IDS):
        self.element_ids = dict(element_ids or ELEMENT_IDS)
        self.day_card_ids = tuple(day_card_ids)
        self.reset()

    def reset(self):
        self.elements = {}
        self.icon = {"src": None, "alt": ""}
        self.units = {"active": None, "inactive": None}
        self.days = []
        self.available = True
        self.reason = None

    def write(self, key, value):
        if key not in self.element_ids:
            raise KeyError(f"Unknown element key '{key}'")
        self.elements[self.element_ids[key]] = value

    def set_icon(self, url, alt):
        self.icon = {"src": url, "alt": alt or ""}

    def set_unit(self, active, inactive):
        self.units = {"active": self.element_ids[active], "inactive": self.element_ids[inactive]}

    def write_days(self, cards):
        # one card per id, extra cards are dropped
        self.days = [dict(card, id=card_id) for card_id, card in zip(self.day_card_ids, cards)]

    def set_unavailable(self, reason):
        self.available = False
        self.reason = reason

    def state(self) -> dict:
        return {
            "available": self.available,
            "reason": self.reason,
            "elements": dict(self.elements),
            "icon": dict(self.icon),
            "units": dict(self.units),
            "days": [dict(day) for day in self.days],
        }
