"""Keep expense record contents out of the logs while leaving them traceable."""

import hashlib
import json
from collections.abc import Iterable, Mapping

FILLED = "[FILLED]"
BLANK = "[BLANK]"
FINGERPRINT_LENGTH = 16


def record_fingerprint(payload: Mapping[str, str]) -> str:
    """
    Short stable digest of a record payload.

    Two payloads with the same field values share a fingerprint whatever
    their key order, so a saved draft can be matched to the submission that
    later sent it without logging vendor names or amounts.
    """
    canonical = json.dumps(dict(payload), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]


def field_presence(payload: Mapping[str, str], visible_keys: Iterable[str] = ()) -> dict[str, str]:
    """Keep `visible_keys` verbatim; every other field reports only FILLED or BLANK."""
    visible = frozenset(visible_keys)
    return {
        key: value if key in visible else (FILLED if str(value).strip() else BLANK)
        for key, value in payload.items()
    }
