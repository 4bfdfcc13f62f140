"""
Database Schemas

Document shapes for the four MongoDB collections served by the API. No field
is required and unknown fields are kept, so whatever the client sends is what
gets stored. Numbers and booleans sent for text fields are stored as
strings (``true`` becomes ``"true"``).

Collections:
- users: generic users
- sectioncontrollers: section controllers (``id`` is a plain field, not the key)
- stations: stations, each pointing at a section controller by id
- trains: trains with their route and stop schedule
"""

from pydantic import BaseModel, BeforeValidator, ConfigDict
from typing import Annotated, List, Optional


def _bool_to_text(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


Text = Annotated[str, BeforeValidator(_bool_to_text)]


class Document(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    def to_document(self) -> dict:
        """Fields as sent by the client, ready for insertion."""
        return self.model_dump(exclude_unset=True)


class User(Document):
    name: Optional[Text] = None
    email: Optional[Text] = None


class SectionController(Document):
    id: Optional[Text] = None
    name: Optional[Text] = None
    section: Optional[Text] = None
    control_office: Optional[Text] = None


class StationMaster(Document):
    id: Optional[Text] = None
    name: Optional[Text] = None


class Station(Document):
    code: Optional[Text] = None
    name: Optional[Text] = None
    section_controller_id: Optional[Text] = None
    station_master: Optional[StationMaster] = None


class ScheduleStop(Document):
    station: Optional[Text] = None
    arrival: Optional[Text] = None
    departure: Optional[Text] = None
    section_controller_id: Optional[Text] = None


class Train(Document):
    train_no: Optional[Text] = None
    name: Optional[Text] = None
    route: Optional[List[Text]] = None
    schedule: Optional[List[ScheduleStop]] = None


class DataBundle(Document):
    """Body of ``POST /api/data``; each list is bulk-inserted on its own."""

    section_controllers: Optional[List[SectionController]] = None
    stations: Optional[List[Station]] = None
    trains: Optional[List[Train]] = None
