from __future__ import annotations

from datetime import UTC, datetime
from typing import Mapping, cast

import redis

FEEDBACK_STREAM_KEY = "feedback:events"

# Cap the stream; consumers only care about recent events.
FEEDBACK_STREAM_MAXLEN = 1_000


def publish_to_stream(*, r: redis.Redis, key: str, fields: Mapping[str, str]) -> str:
    """Append an entry to a Redis stream."""

    # redis-py stubs expect field/value unions; in our app we only use string fields/values.
    stream_id = r.xadd(key, {str(k): str(v) for k, v in fields.items()}, maxlen=FEEDBACK_STREAM_MAXLEN, approximate=True)
    return cast(str, stream_id)


def publish_feedback_event(*, r: redis.Redis, event: str) -> str:
    return publish_to_stream(
        r=r,
        key=FEEDBACK_STREAM_KEY,
        fields={"type": "feedback", "event": event, "ts": datetime.now(tz=UTC).isoformat()},
    )
