from __future__ import annotations

from pydantic import BaseModel


class Labels(BaseModel):
    """User-facing text. `{0}` placeholders are filled by `render`."""

    title: str = "Flight Selection"
    loading: str = "Loading..."
    select_trip_message: str = "Open a trip record to choose a flight."
    set_date_message: str = "Set the {0} field on this trip to see available flights."
    preferred_trip_start: str = "Preferred Trip Start"
    currently_selected: str = "Currently Selected"
    clear_selection: str = "Clear Selection"
    your_ticket: str = "Your Ticket"
    view_ticket: str = "View Ticket"
    select_flight: str = "Select Flight"
    no_flights_title: str = "No Flights Available"
    no_flights_message: str = "There are no flights scheduled for {0}."

    def render(self, preferred_date_formatted: str) -> dict:
        out = self.model_dump(exclude={"preferred_trip_start"})
        out["set_date_message"] = self.set_date_message.replace("{0}", self.preferred_trip_start)
        out["no_flights_message"] = self.no_flights_message.replace("{0}", preferred_date_formatted)
        return out


DEFAULT_LABELS = Labels()
