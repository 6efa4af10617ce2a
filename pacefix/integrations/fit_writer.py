"""FIT encoder turning assembled message models into FIT bytes."""

import logging
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Sequence, Union

from fit_tool.fit_file_builder import FitFileBuilder
from fit_tool.profile.messages.activity_message import ActivityMessage
from fit_tool.profile.messages.developer_data_id_message import DeveloperDataIdMessage
from fit_tool.profile.messages.device_info_message import DeviceInfoMessage
from fit_tool.profile.messages.event_message import EventMessage
from fit_tool.profile.messages.field_description_message import FieldDescriptionMessage
from fit_tool.profile.messages.file_id_message import FileIdMessage
from fit_tool.profile.messages.lap_message import LapMessage
from fit_tool.profile.messages.record_message import RecordMessage
from fit_tool.profile.messages.session_message import SessionMessage
from fit_tool.profile.profile_type import LapTrigger as FitLapTrigger

from pacefix.models.fit_data import AssembledMessage, LapTrigger, MessageKind

logger = logging.getLogger(__name__)

MESSAGE_CLASSES = {
    MessageKind.FILE_ID: FileIdMessage,
    MessageKind.DEVELOPER_DATA_ID: DeveloperDataIdMessage,
    MessageKind.FIELD_DESCRIPTION: FieldDescriptionMessage,
    MessageKind.DEVICE_INFO: DeviceInfoMessage,
    MessageKind.RECORD: RecordMessage,
    MessageKind.EVENT: EventMessage,
    MessageKind.LAP: LapMessage,
    MessageKind.SESSION: SessionMessage,
    MessageKind.ACTIVITY: ActivityMessage,
}

# Model enums -> fit-tool enums, matched by member name
ENUM_TYPES = {
    LapTrigger: FitLapTrigger,
}

# Averages computed as floats but stored as whole numbers in FIT
ROUNDED_FIELDS = {'avg_heart_rate', 'avg_cadence'}


class FITWriter:
    """Encodes assembled messages with fit-tool's FitFileBuilder."""

    def __init__(self, min_string_size: int = 50):
        """Initialize writer.

        Args:
            min_string_size: Minimum byte size reserved for string fields
        """
        self.min_string_size = min_string_size

    def encode(self, messages: Sequence[AssembledMessage]) -> bytes:
        """Encode messages, in the given order, to FIT bytes."""
        builder = FitFileBuilder(auto_define=True, min_string_size=self.min_string_size)
        for assembled in messages:
            builder.add(self.to_fit_message(assembled))

        data = builder.build().to_bytes()
        logger.info(f"Encoded {len(messages)} messages ({len(data)} bytes)")
        return data

    def write(self, messages: Sequence[AssembledMessage], output_path: Union[str, Path]) -> Path:
        """Encode messages and write them to ``output_path``."""
        data = self.encode(messages)
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(data)
        logger.info(f"FIT file written to {output_path}")
        return output_path

    def to_fit_message(self, assembled: AssembledMessage):
        """Copy every field fit-tool knows onto a new fit-tool message."""
        fit_message = MESSAGE_CLASSES[assembled.kind]()
        message = assembled.message

        for name, value in message.field_values().items():
            if not isinstance(getattr(type(fit_message), name, None), property):
                logger.debug(f"{assembled.kind.value}: no FIT field '{name}', skipped")
                continue
            setattr(fit_message, name, self._encode_value(name, value, message.raw_values))

        return fit_message

    def _encode_value(self, name: str, value: Any, raw_values: Dict[str, Any]) -> Any:
        """Convert a model value to what fit-tool's setters expect."""
        if name in raw_values and isinstance(value, (str, int, Enum)):
            return raw_values[name]

        if isinstance(value, datetime):
            # fit-tool takes milliseconds since the Unix epoch
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            return round(value.timestamp() * 1000)

        if isinstance(value, Enum) and type(value) in ENUM_TYPES:
            return ENUM_TYPES[type(value)][value.name].value

        if name in ROUNDED_FIELDS and isinstance(value, float):
            return int(round(value))

        return value
