"""
Session envelope persistence.

SessionVault is the single read/write path for the core's persisted
state. It owns the storage key names and the wire shapes:

    pin_session             -> {member_id, user_id, store_id, role, name,
                                store_name, login_time, last_activity,
                                expires_at}
    storefy_selected_store  -> {storeId, userId, timestamp}
                               (or a bare store ID from older clients)
    storefy_session_version -> envelope format version

Corrupt records are dropped on read and never surface as errors.
"""

import json
import logging
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from shared.storage import KeyValueStorage

from .exceptions import SessionDecodeError
from .models import PinSession, SessionEnvelope, StoreSelection

logger = logging.getLogger(__name__)

PIN_SESSION_KEY = "pin_session"
STORE_SELECTION_KEY = "storefy_selected_store"
ENVELOPE_VERSION_KEY = "storefy_session_version"
ENVELOPE_VERSION = 2


def decode_pin_session(raw: str) -> PinSession:
    """
    Decode a persisted PIN session record.

    Raises:
        SessionDecodeError: If the record is not JSON or misses required fields
    """
    try:
        payload = json.loads(raw)
    except ValueError as e:
        raise SessionDecodeError(PIN_SESSION_KEY, f"not JSON ({e})")
    if not isinstance(payload, dict):
        raise SessionDecodeError(PIN_SESSION_KEY, "not a JSON object")
    try:
        return PinSession.model_validate(payload)
    except PydanticValidationError as e:
        raise SessionDecodeError(PIN_SESSION_KEY, f"{e.error_count()} invalid field(s)")


def encode_pin_session(session: PinSession) -> str:
    return json.dumps(session.model_dump(mode="json"))


def decode_store_selection(raw: str) -> StoreSelection:
    """
    Decode a persisted store selection.

    Accepts both the JSON form and the legacy bare store ID.

    Raises:
        SessionDecodeError: If the record is malformed
    """
    text = raw.strip()
    if not text:
        raise SessionDecodeError(STORE_SELECTION_KEY, "empty value")

    if not text.startswith("{"):
        return StoreSelection(store_id=text, user_id=None, timestamp=0, legacy=True)

    try:
        payload: Any = json.loads(text)
    except ValueError as e:
        raise SessionDecodeError(STORE_SELECTION_KEY, f"not JSON ({e})")
    if not isinstance(payload, dict):
        raise SessionDecodeError(STORE_SELECTION_KEY, "not a JSON object")
    try:
        return StoreSelection.model_validate(payload)
    except PydanticValidationError as e:
        raise SessionDecodeError(STORE_SELECTION_KEY, f"{e.error_count()} invalid field(s)")


def encode_store_selection(selection: StoreSelection) -> str:
    if selection.legacy:
        # Left as found until the resolver upgrades it
        return selection.store_id
    return json.dumps(selection.model_dump(mode="json", by_alias=True))


class SessionVault:
    """
    Reads and writes the session envelope.

    A read decodes every record; a write replaces every record in one
    storage batch. Callers never touch the storage keys directly.
    """

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage

    @property
    def storage(self) -> KeyValueStorage:
        return self._storage

    def read(self, repair: bool = True) -> SessionEnvelope:
        """
        Read the envelope, dropping any record that fails to decode.

        With `repair=False` a corrupt record reads as absent but stays in
        storage. Expiry is not checked here; that is the Session Store's job.
        """
        return SessionEnvelope(
            version=ENVELOPE_VERSION,
            pin_session=self._read_record(PIN_SESSION_KEY, decode_pin_session, repair),
            store_selection=self._read_record(
                STORE_SELECTION_KEY, decode_store_selection, repair
            ),
        )

    def write(self, envelope: SessionEnvelope) -> None:
        """Persist the whole envelope in one batch."""
        updates: dict[str, Optional[str]] = {
            PIN_SESSION_KEY: (
                encode_pin_session(envelope.pin_session)
                if envelope.pin_session is not None
                else None
            ),
            STORE_SELECTION_KEY: (
                encode_store_selection(envelope.store_selection)
                if envelope.store_selection is not None
                else None
            ),
            ENVELOPE_VERSION_KEY: str(ENVELOPE_VERSION),
        }
        self._storage.apply(updates)

    def update(self, **changes: Any) -> SessionEnvelope:
        """Read, replace the given envelope fields, write back."""
        envelope = self.read().model_copy(update=changes)
        self.write(envelope)
        return envelope

    def _read_record(self, key: str, decoder, repair: bool = True):
        raw = self._storage.get_item(key)
        if raw is None:
            return None
        try:
            return decoder(raw)
        except SessionDecodeError as e:
            if repair:
                logger.debug(f"Dropping corrupt record: {e.message}")
                self._storage.remove_item(key)
            return None
