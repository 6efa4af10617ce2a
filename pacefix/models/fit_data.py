"""Pydantic models for decoded FIT messages and the assembled output."""

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pacefix.config import SEMICIRCLES_TO_DEGREES


def _ensure_utc(v):
    """Ensure datetime is timezone aware."""
    if isinstance(v, datetime) and not v.tzinfo:
        return v.replace(tzinfo=timezone.utc)
    return v


def _semicircles_to_degrees(v):
    """Convert semicircles to degrees if needed."""
    if v is not None and abs(v) > 180:
        return v * SEMICIRCLES_TO_DEGREES
    return v


class MessageKind(str, Enum):
    """FIT message kinds the assembler emits, by profile name."""
    FILE_ID = "file_id"
    DEVELOPER_DATA_ID = "developer_data_id"
    FIELD_DESCRIPTION = "field_description"
    DEVICE_INFO = "device_info"
    RECORD = "record"
    EVENT = "event"
    LAP = "lap"
    SESSION = "session"
    ACTIVITY = "activity"


class LapTrigger(str, Enum):
    """What closed a lap."""
    MANUAL = "manual"
    TIME = "time"
    DISTANCE = "distance"
    POSITION_START = "position_start"
    POSITION_LAP = "position_lap"
    POSITION_WAYPOINT = "position_waypoint"
    POSITION_MARKED = "position_marked"
    SESSION_END = "session_end"
    FITNESS_EQUIPMENT = "fitness_equipment"


class FITMessage(BaseModel):
    """Base for every decoded message.

    Unknown fields are kept as extras so they survive a decode/encode cycle.
    ``raw_values`` holds the undecoded codes of enum fields, keyed by field
    name, so the writer can put back exactly what the device recorded.
    """
    model_config = ConfigDict(extra='allow')

    raw_values: Dict[str, Any] = Field(default_factory=dict, exclude=True)

    def field_values(self) -> Dict[str, Any]:
        """All populated fields, declared and extra."""
        return self.model_dump(exclude_none=True)


class FITFileId(FITMessage):
    """File identity; must be the first message of every FIT file."""
    type: Optional[Union[str, int]] = None
    manufacturer: Optional[Any] = None
    product: Optional[Any] = None
    serial_number: Optional[int] = None
    time_created: Optional[datetime] = None

    @field_validator('time_created')
    @classmethod
    def validate_datetime(cls, v):
        return _ensure_utc(v)


class FITDeveloperDataId(FITMessage):
    """Developer application registration."""
    developer_data_index: Optional[int] = None
    application_id: Optional[Any] = None
    application_version: Optional[int] = None


class FITFieldDescription(FITMessage):
    """Developer field definition."""
    developer_data_index: Optional[int] = None
    field_definition_number: Optional[int] = None
    fit_base_type_id: Optional[Any] = None
    field_name: Optional[str] = None
    units: Optional[str] = None


class FITDeviceInfo(FITMessage):
    """Device information from FIT file."""
    timestamp: Optional[datetime] = None
    manufacturer: Optional[Any] = None
    product: Optional[Any] = None
    serial_number: Optional[int] = None
    software_version: Optional[float] = None
    device_index: Optional[Any] = None
    product_name: Optional[str] = None

    @field_validator('timestamp')
    @classmethod
    def validate_datetime(cls, v):
        return _ensure_utc(v)


class FITRecordData(FITMessage):
    """Individual record (data point) from FIT file."""

    @field_validator('position_lat', 'position_long', mode='before')
    @classmethod
    def convert_semicircles(cls, v):
        return _semicircles_to_degrees(v)

    timestamp: datetime

    # Position
    position_lat: Optional[float] = Field(None, ge=-90, le=90)
    position_long: Optional[float] = Field(None, ge=-180, le=180)

    # Distance and speed
    distance: Optional[float] = Field(None, ge=0)  # meters
    speed: Optional[float] = Field(None, ge=0)  # m/s
    enhanced_speed: Optional[float] = Field(None, ge=0)  # m/s

    # Altitude
    altitude: Optional[float] = None
    enhanced_altitude: Optional[float] = None

    # Heart rate and cadence
    heart_rate: Optional[int] = Field(None, ge=0, le=255)  # bpm
    cadence: Optional[int] = Field(None, ge=0, le=255)  # rpm / spm

    @field_validator('timestamp')
    @classmethod
    def validate_timestamp(cls, v):
        return _ensure_utc(v)


class FITEvent(FITMessage):
    """Event data from FIT file."""
    timestamp: Optional[datetime] = None
    event: Optional[Union[str, int]] = None
    event_type: Optional[Union[str, int]] = None
    data: Optional[Any] = None
    event_group: Optional[int] = None

    @field_validator('timestamp')
    @classmethod
    def validate_datetime(cls, v):
        return _ensure_utc(v)


class FITLapData(FITMessage):
    """Lap data: read from the file, or built by the lap reconciler.

    ``min_heart_rate`` and ``min_cadence`` stay ``None`` for laps in which
    no sample carried that signal.
    """

    @field_validator('start_position_lat', 'start_position_long',
                     'end_position_lat', 'end_position_long', mode='before')
    @classmethod
    def convert_semicircles(cls, v):
        return _semicircles_to_degrees(v)

    timestamp: Optional[datetime] = None
    start_time: Optional[datetime] = None
    lap_trigger: Optional[Union[LapTrigger, int]] = None

    # Time and distance
    total_elapsed_time: Optional[float] = Field(None, ge=0)
    total_timer_time: Optional[float] = Field(None, ge=0)
    total_distance: Optional[float] = Field(None, ge=0)

    # Speed
    avg_speed: Optional[float] = Field(None, ge=0)
    max_speed: Optional[float] = Field(None, ge=0)
    enhanced_avg_speed: Optional[float] = Field(None, ge=0)
    enhanced_max_speed: Optional[float] = Field(None, ge=0)

    # Heart rate
    min_heart_rate: Optional[int] = Field(None, ge=0, le=255)
    avg_heart_rate: Optional[float] = Field(None, ge=0, le=255)
    max_heart_rate: Optional[int] = Field(None, ge=0, le=255)

    # Cadence
    min_cadence: Optional[int] = Field(None, ge=0, le=255)
    avg_cadence: Optional[float] = Field(None, ge=0, le=255)
    max_cadence: Optional[int] = Field(None, ge=0, le=255)

    # Positions
    start_position_lat: Optional[float] = Field(None, ge=-90, le=90)
    start_position_long: Optional[float] = Field(None, ge=-180, le=180)
    end_position_lat: Optional[float] = Field(None, ge=-90, le=90)
    end_position_long: Optional[float] = Field(None, ge=-180, le=180)

    message_index: Optional[int] = None

    @field_validator('lap_trigger', mode='before')
    @classmethod
    def unknown_trigger(cls, v):
        """Drop unnamed trigger strings; out-of-profile codes stay as ints."""
        if isinstance(v, str) and v not in {t.value for t in LapTrigger}:
            return None
        return v

    @field_validator('timestamp', 'start_time')
    @classmethod
    def validate_datetime(cls, v):
        return _ensure_utc(v)


class FITSessionData(FITMessage):
    """Session summary data from FIT file."""

    @field_validator('start_position_lat', 'start_position_long', mode='before')
    @classmethod
    def convert_semicircles(cls, v):
        return _semicircles_to_degrees(v)

    # Time fields
    timestamp: Optional[datetime] = None
    start_time: Optional[datetime] = None
    total_elapsed_time: Optional[float] = Field(None, ge=0)
    total_timer_time: Optional[float] = Field(None, ge=0)

    # Distance and speed
    total_distance: Optional[float] = Field(None, ge=0)
    avg_speed: Optional[float] = Field(None, ge=0)
    max_speed: Optional[float] = Field(None, ge=0)
    enhanced_avg_speed: Optional[float] = Field(None, ge=0)
    enhanced_max_speed: Optional[float] = Field(None, ge=0)

    # Heart rate
    avg_heart_rate: Optional[int] = Field(None, ge=0, le=255)
    max_heart_rate: Optional[int] = Field(None, ge=0, le=255)

    # Cadence
    avg_cadence: Optional[int] = Field(None, ge=0, le=255)
    max_cadence: Optional[int] = Field(None, ge=0, le=255)

    # GPS
    start_position_lat: Optional[float] = Field(None, ge=-90, le=90)
    start_position_long: Optional[float] = Field(None, ge=-180, le=180)

    # Sport info
    sport: Optional[Union[str, int]] = None
    sub_sport: Optional[Union[str, int]] = None

    num_laps: Optional[int] = None

    @field_validator('timestamp', 'start_time')
    @classmethod
    def validate_datetime(cls, v):
        return _ensure_utc(v)


class FITActivity(FITMessage):
    """Activity summary closing the file."""
    timestamp: Optional[datetime] = None
    total_timer_time: Optional[float] = Field(None, ge=0)
    num_sessions: Optional[int] = None
    type: Optional[Union[str, int]] = None
    event: Optional[Union[str, int]] = None
    event_type: Optional[Union[str, int]] = None
    local_timestamp: Optional[Any] = None

    @field_validator('timestamp')
    @classmethod
    def validate_datetime(cls, v):
        return _ensure_utc(v)


class LapWindow(NamedTuple):
    """Time range a recorded lap covers."""
    start_time: datetime
    end_time: datetime
    total_distance: float
    total_timer_time: float


class DecodedActivity(BaseModel):
    """Every message of one decoded FIT activity, grouped by kind."""
    file_path: Optional[str] = None
    file_ids: List[FITFileId] = Field(default_factory=list)
    developer_data_ids: List[FITDeveloperDataId] = Field(default_factory=list)
    field_descriptions: List[FITFieldDescription] = Field(default_factory=list)
    device_infos: List[FITDeviceInfo] = Field(default_factory=list)
    records: List[FITRecordData] = Field(default_factory=list)
    events: List[FITEvent] = Field(default_factory=list)
    laps: List[FITLapData] = Field(default_factory=list)
    sessions: List[FITSessionData] = Field(default_factory=list)
    activities: List[FITActivity] = Field(default_factory=list)
    parsing_errors: List[str] = Field(default_factory=list)

    @property
    def file_id(self) -> Optional[FITFileId]:
        return self.file_ids[0] if self.file_ids else None

    @property
    def session(self) -> Optional[FITSessionData]:
        return self.sessions[0] if self.sessions else None

    def lap_windows(self) -> List[LapWindow]:
        """Time ranges of the recorded laps.

        Each lap ends where the next one starts; the last lap ends at the
        final record (or its own timestamp when there are no records).
        """
        windows = []
        activity_end = self.records[-1].timestamp if self.records else None

        for index, lap in enumerate(self.laps):
            start = lap.start_time
            if start is None:
                if windows:
                    start = windows[-1].end_time
                elif self.records:
                    start = self.records[0].timestamp
                else:
                    start = lap.timestamp

            if index + 1 < len(self.laps):
                end = self.laps[index + 1].start_time or lap.timestamp or start
            else:
                end = activity_end or lap.timestamp or start

            windows.append(LapWindow(
                start_time=start,
                end_time=end,
                total_distance=lap.total_distance or 0.0,
                total_timer_time=lap.total_timer_time or 0.0,
            ))

        return windows


class AssembledMessage(NamedTuple):
    """One output message tagged with its kind, in encoder order."""
    kind: MessageKind
    message: FITMessage


class TransformResult(BaseModel):
    """Output of one pace transformation."""
    messages: List[AssembledMessage] = Field(default_factory=list)
    records: List[FITRecordData] = Field(default_factory=list)
    laps: List[FITLapData] = Field(default_factory=list)
    session: FITSessionData
    lap_mode: str
    output_path: Optional[Path] = None  # set once written to disk

    @property
    def total_distance(self) -> float:
        return self.session.total_distance or 0.0

    def kinds(self) -> List[MessageKind]:
        """Message kinds in output order."""
        return [m.kind for m in self.messages]
