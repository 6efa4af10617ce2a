"""Merge passthrough and rebuilt messages into encoder order."""

import logging
from typing import List, Sequence

from pacefix.errors import MissingRequiredMessageError
from pacefix.models.fit_data import (
    AssembledMessage, DecodedActivity, FITFileId, FITLapData,
    FITRecordData, FITSessionData, MessageKind,
)

logger = logging.getLogger(__name__)

# Encoder order; file_id must come first or the output cannot be read back.
MESSAGE_ORDER = (
    MessageKind.FILE_ID,
    MessageKind.DEVELOPER_DATA_ID,
    MessageKind.FIELD_DESCRIPTION,
    MessageKind.DEVICE_INFO,
    MessageKind.RECORD,
    MessageKind.EVENT,
    MessageKind.LAP,
    MessageKind.SESSION,
    MessageKind.ACTIVITY,
)


class MessageAssembler:
    """Builds the ordered message list handed to the FIT writer."""

    @staticmethod
    def require_file_id(decoded: DecodedActivity) -> FITFileId:
        """Return the file identity message, failing when it is absent."""
        if decoded.file_id is None:
            raise MissingRequiredMessageError(MessageKind.FILE_ID.value)
        return decoded.file_id

    def assemble(
        self,
        decoded: DecodedActivity,
        records: Sequence[FITRecordData],
        laps: Sequence[FITLapData],
        session: FITSessionData,
    ) -> List[AssembledMessage]:
        """Assemble output messages.

        Args:
            decoded: Input activity supplying the passthrough messages
            records: Resampled records
            laps: Output laps (may be empty)
            session: Recomputed session

        Returns:
            Messages in the order listed in ``MESSAGE_ORDER``
        """
        file_id = self.require_file_id(decoded)

        groups = {
            MessageKind.FILE_ID: [file_id],
            MessageKind.DEVELOPER_DATA_ID: decoded.developer_data_ids,
            MessageKind.FIELD_DESCRIPTION: decoded.field_descriptions,
            MessageKind.DEVICE_INFO: decoded.device_infos,
            MessageKind.RECORD: records,
            MessageKind.EVENT: decoded.events,
            MessageKind.LAP: laps,
            MessageKind.SESSION: [session],
            MessageKind.ACTIVITY: decoded.activities,
        }

        messages = [
            AssembledMessage(kind, message)
            for kind in MESSAGE_ORDER
            for message in groups[kind]
        ]

        counts = ", ".join(f"{kind.value}={len(groups[kind])}" for kind in MESSAGE_ORDER)
        logger.debug(f"Assembled {len(messages)} messages: {counts}")
        return messages
