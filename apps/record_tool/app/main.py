from __future__ import annotations
import uuid
from datetime import date
from typing import List, Optional
from fastapi import FastAPI, HTTPException, Query
from shared.logging import configure_logging, get_logger
from trip_schemas.models import (
    FlightRecord, TicketRecord, ToolError,
    TRIP_CONTACT, TRIP_FIELDS, TRIP_FLIGHT, TRIP_ID, TRIP_PREFERRED_DATE,
    TICKET_ACTIVE, TICKET_VOID,
)
from trip_schemas.tool_schemas import (
    ToolRegistryResponse, RegistryTool,
    RecordResponse, UpdateRecordRequest, UpdateRecordResponse,
    CreateTripRequest, CreateFlightRequest, CreateTicketRequest, CreatedResponse,
    AvailableFlightsResponse, CurrentTicketResponse,
)
from .config import LOG_LEVEL
from .db import init_db, get_conn, to_utc_iso

configure_logging(LOG_LEVEL)
log = get_logger(__name__)

app = FastAPI(title="Record Tool Server", version="v1")

def _error(status_code: int, code: str, message: str, details: Optional[dict] = None) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=ToolError(code=code, message=message, details=details).model_dump(),
    )

def _trip_fields(row) -> dict:
    return {
        TRIP_PREFERRED_DATE: row["preferred_trip_start"],
        TRIP_FLIGHT: row["flight_id"],
        TRIP_CONTACT: row["contact_id"],
    }

@app.on_event("startup")
def _startup():
    init_db()
    log.info("db_initialized")

@app.get("/health")
def health():
    return {"ok": True, "service": "record_tool"}

@app.get("/tools/registry", response_model=ToolRegistryResponse)
def registry():
    tools = [
        RegistryTool(
            name="get_record",
            description="Fetch selected fields of a trip record",
            input_schema={"type": "object", "properties": {"id": {"type": "string"}, "fields": {"type": "array"}}, "required": ["id"]},
            output_schema=RecordResponse.model_json_schema(),
            timeout_ms=2000,
        ),
        RegistryTool(
            name="update_record",
            description="Apply a partial field update to a trip record",
            input_schema=UpdateRecordRequest.model_json_schema(),
            output_schema=UpdateRecordResponse.model_json_schema(),
        ),
        RegistryTool(
            name="available_flights",
            description="Flights departing on a preferred date with remaining capacity",
            input_schema={"type": "object", "properties": {"preferred_date": {"type": "string", "format": "date"}}, "required": ["preferred_date"]},
            output_schema=AvailableFlightsResponse.model_json_schema(),
        ),
        RegistryTool(
            name="current_ticket",
            description="Active ticket held by a contact on a flight",
            input_schema={"type": "object", "properties": {"flight_id": {"type": "string"}, "contact_id": {"type": "string"}}, "required": ["flight_id", "contact_id"]},
            output_schema=CurrentTicketResponse.model_json_schema(),
            timeout_ms=2000,
        ),
    ]
    return ToolRegistryResponse(tools=tools)

@app.post("/records/trips", response_model=CreatedResponse)
def create_trip(req: CreateTripRequest):
    trip_id = str(uuid.uuid4())
    conn = get_conn()
    conn.execute(
        "INSERT INTO trips(trip_id, name, preferred_trip_start, flight_id, contact_id) VALUES (?, ?, ?, ?, ?)",
        (
            trip_id,
            req.name,
            req.preferred_trip_start.isoformat() if req.preferred_trip_start else None,
            req.flight_id,
            req.contact_id,
        ),
    )
    conn.commit()
    conn.close()
    return CreatedResponse(id=trip_id)

@app.post("/records/flights", response_model=CreatedResponse)
def create_flight(req: CreateFlightRequest):
    flight_id = str(uuid.uuid4())
    conn = get_conn()
    conn.execute(
        "INSERT INTO flights(flight_id, name, start_date_time, capacity) VALUES (?, ?, ?, ?)",
        (flight_id, req.name, to_utc_iso(req.start_date_time), req.capacity),
    )
    conn.commit()
    conn.close()
    return CreatedResponse(id=flight_id)

@app.post("/records/tickets", response_model=CreatedResponse)
def create_ticket(req: CreateTicketRequest):
    conn = get_conn()
    flight = conn.execute("SELECT flight_id FROM flights WHERE flight_id=?", (req.flight_id,)).fetchone()
    if not flight:
        conn.close()
        raise _error(400, "invalid_reference", f"Flight {req.flight_id} does not exist.")
    ticket_id = str(uuid.uuid4())
    conn.execute(
        "INSERT INTO tickets(ticket_id, name, flight_id, contact_id, status) VALUES (?, ?, ?, ?, ?)",
        (ticket_id, req.name, req.flight_id, req.contact_id, TICKET_ACTIVE),
    )
    conn.commit()
    conn.close()
    return CreatedResponse(id=ticket_id)

@app.get("/records/trips/{trip_id}", response_model=RecordResponse)
def get_record(trip_id: str, fields: Optional[List[str]] = Query(default=None)):
    unknown = [f for f in fields or [] if f not in TRIP_FIELDS]
    if unknown:
        raise _error(400, "invalid_field", f"No such field(s) on trip: {', '.join(unknown)}")

    conn = get_conn()
    row = conn.execute("SELECT * FROM trips WHERE trip_id=?", (trip_id,)).fetchone()
    conn.close()
    if not row:
        raise _error(404, "not_found", f"Trip {trip_id} does not exist.")

    values = _trip_fields(row)
    wanted = fields or TRIP_FIELDS
    return RecordResponse(id=trip_id, fields={f: values[f] for f in wanted})

@app.post("/records/update", response_model=UpdateRecordResponse)
def update_record(req: UpdateRecordRequest):
    trip_id = req.record_id
    if not trip_id:
        raise _error(400, "missing_id", "The field map must include the record id.")
    changes = {k: v for k, v in req.fields.items() if k != TRIP_ID}
    unknown = [f for f in changes if f not in TRIP_FIELDS]
    if unknown:
        raise _error(400, "invalid_field", f"No such field(s) on trip: {', '.join(unknown)}")

    conn = get_conn()
    try:
        row = conn.execute("SELECT * FROM trips WHERE trip_id=?", (trip_id,)).fetchone()
        if not row:
            raise _error(404, "not_found", f"Trip {trip_id} does not exist.")

        if changes.get(TRIP_PREFERRED_DATE):
            try:
                changes[TRIP_PREFERRED_DATE] = date.fromisoformat(str(changes[TRIP_PREFERRED_DATE])).isoformat()
            except ValueError:
                raise _error(400, "invalid_value", f"{TRIP_PREFERRED_DATE} must be a YYYY-MM-DD date.")

        if TRIP_FLIGHT in changes:
            # empty string clears the field the same way None does
            changes[TRIP_FLIGHT] = changes[TRIP_FLIGHT] or None
            new_flight = changes[TRIP_FLIGHT]
            if new_flight and not conn.execute("SELECT 1 FROM flights WHERE flight_id=?", (new_flight,)).fetchone():
                raise _error(400, "invalid_reference", f"Flight {new_flight} does not exist.")

        for field, value in changes.items():
            conn.execute(f"UPDATE trips SET {field}=? WHERE trip_id=?", (value, trip_id))

        voided = []
        old_flight = row["flight_id"]
        if TRIP_FLIGHT in changes and old_flight and old_flight != changes[TRIP_FLIGHT] and row["contact_id"]:
            # the contact gives up the seat on the flight they left
            voided = [
                r["ticket_id"]
                for r in conn.execute(
                    "SELECT ticket_id FROM tickets WHERE flight_id=? AND contact_id=? AND status=?",
                    (old_flight, row["contact_id"], TICKET_ACTIVE),
                ).fetchall()
            ]
            conn.execute(
                "UPDATE tickets SET status=? WHERE flight_id=? AND contact_id=? AND status=?",
                (TICKET_VOID, old_flight, row["contact_id"], TICKET_ACTIVE),
            )
        conn.commit()

        updated = conn.execute("SELECT * FROM trips WHERE trip_id=?", (trip_id,)).fetchone()
    finally:
        conn.close()

    log.info("trip_updated trip=%s fields=%s voided=%s", trip_id, ",".join(changes), len(voided))
    return UpdateRecordResponse(id=trip_id, fields=_trip_fields(updated), voided_tickets=voided)

@app.get("/tools/available_flights", response_model=AvailableFlightsResponse)
def available_flights(preferred_date: date):
    conn = get_conn()
    rows = conn.execute(
        "SELECT f.flight_id, f.name, f.start_date_time, f.capacity, "
        "(SELECT COUNT(*) FROM tickets t WHERE t.flight_id=f.flight_id AND t.status=?) AS issued "
        "FROM flights f WHERE substr(f.start_date_time, 1, 10)=? ORDER BY f.start_date_time",
        (TICKET_ACTIVE, preferred_date.isoformat()),
    ).fetchall()
    conn.close()

    flights = [
        FlightRecord(
            id=r["flight_id"],
            name=r["name"],
            start_date_time=r["start_date_time"],
            available_tickets=max(r["capacity"] - r["issued"], 0),
        )
        for r in rows
    ]
    return AvailableFlightsResponse(preferred_date=preferred_date, flights=flights, count=len(flights))

@app.get("/tools/current_ticket", response_model=CurrentTicketResponse)
def current_ticket(flight_id: str, contact_id: str):
    conn = get_conn()
    row = conn.execute(
        "SELECT * FROM tickets WHERE flight_id=? AND contact_id=? AND status=? ORDER BY created_at DESC LIMIT 1",
        (flight_id, contact_id, TICKET_ACTIVE),
    ).fetchone()
    conn.close()
    if not row:
        return CurrentTicketResponse(ticket=None)
    return CurrentTicketResponse(
        ticket=TicketRecord(
            id=row["ticket_id"],
            name=row["name"],
            flight_id=row["flight_id"],
            contact_id=row["contact_id"],
            status=row["status"],
        )
    )
