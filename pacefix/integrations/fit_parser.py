"""FIT file parser producing typed message models."""

import io
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import fitparse
from fitparse.records import DevField
from pydantic import ValidationError

from pacefix.config import FIT_EPOCH
from pacefix.errors import FITDecodeError
from pacefix.models.fit_data import (
    DecodedActivity, FITActivity, FITDeveloperDataId, FITDeviceInfo,
    FITEvent, FITFieldDescription, FITFileId, FITLapData, FITRecordData,
    FITSessionData,
)

logger = logging.getLogger(__name__)

# FIT message name -> (DecodedActivity attribute, model)
MESSAGE_MODELS = {
    'file_id': ('file_ids', FITFileId),
    'developer_data_id': ('developer_data_ids', FITDeveloperDataId),
    'field_description': ('field_descriptions', FITFieldDescription),
    'device_info': ('device_infos', FITDeviceInfo),
    'record': ('records', FITRecordData),
    'event': ('events', FITEvent),
    'lap': ('laps', FITLapData),
    'session': ('sessions', FITSessionData),
    'activity': ('activities', FITActivity),
}


class FITParser:
    """Parser for FIT activity files.

    Only the message kinds the pace fixer writes back are kept; everything
    else in the file is ignored.
    """

    def parse_fit_file(self, fit_path: Union[str, Path]) -> DecodedActivity:
        """Parse a FIT file.

        Args:
            fit_path: Path to FIT file

        Returns:
            Decoded activity
        """
        fit_path = Path(fit_path)
        if not fit_path.exists():
            raise FileNotFoundError(f"FIT file not found: {fit_path}")

        return self.parse_fit_bytes(fit_path.read_bytes(), source=str(fit_path))

    def parse_fit_bytes(self, data: bytes, source: Optional[str] = None) -> DecodedActivity:
        """Parse FIT content already loaded in memory.

        Args:
            data: Raw FIT bytes
            source: Where the bytes came from, for messages and the result

        Returns:
            Decoded activity
        """
        decoded = DecodedActivity(file_path=source)

        try:
            fitfile = fitparse.FitFile(io.BytesIO(data))
            for message in fitfile.get_messages():
                self._process_message(message, decoded)
        except fitparse.FitParseError as e:
            logger.error(f"Error parsing FIT file {source or '<bytes>'}: {e}")
            raise FITDecodeError(f"This is not a valid FIT file: {e}") from e

        decoded.records.sort(key=lambda record: record.timestamp)

        logger.info(
            f"Parsed FIT file with {len(decoded.records)} records, "
            f"{len(decoded.laps)} laps, {len(decoded.sessions)} sessions"
        )
        if decoded.parsing_errors:
            logger.warning(f"Skipped {len(decoded.parsing_errors)} invalid messages")
        return decoded

    def _process_message(self, message, decoded: DecodedActivity):
        """Route a single FIT message into the decoded activity.

        Args:
            message: fitparse data message
            decoded: Activity to update
        """
        target = MESSAGE_MODELS.get(message.name)
        if target is None:
            return

        attribute, model = target
        values, raw_values = self._extract_fields(message)

        if model is FITRecordData and 'timestamp' not in values:
            return

        try:
            getattr(decoded, attribute).append(model(raw_values=raw_values, **values))
        except ValidationError as e:
            decoded.parsing_errors.append(f"{message.name}: {e}")
            logger.debug(f"Invalid {message.name} message skipped: {e}")

    def _extract_fields(self, message) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        """Collect decoded field values and raw enum codes of one message."""
        values = {}
        raw_values = {}

        for field in message:
            if not field.name or field.value is None:
                continue
            if field.name.startswith('unknown') or isinstance(field.field, DevField):
                continue

            value = field.value
            if isinstance(value, datetime) or field.name == 'timestamp':
                value = self._convert_timestamp(value)

            # enum fields decode to names; keep the code for re-encoding
            field_type = getattr(field.field, 'type', None)
            if getattr(field_type, 'values', None) and isinstance(field.raw_value, int):
                raw_values[field.name] = field.raw_value

            values[field.name] = value

        return values, raw_values

    def _convert_timestamp(self, timestamp):
        """Convert FIT timestamp to datetime.

        Args:
            timestamp: FIT timestamp

        Returns:
            datetime object
        """
        if isinstance(timestamp, datetime):
            return timestamp

        # FIT timestamps are seconds since Dec 31, 1989 00:00:00 UTC
        if isinstance(timestamp, (int, float)):
            return FIT_EPOCH + timedelta(seconds=int(timestamp))

        return timestamp
