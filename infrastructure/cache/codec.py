import json
from datetime import datetime
from decimal import Decimal, InvalidOperation

from domain.exceptions.swap import CacheError
from domain.models.swap import CacheRecord, RateEntry


def dump_record(record: CacheRecord) -> str:
    record_dict = {
        "key": record.key,
        "code": record.value.code,
        "rate": str(record.value.rate),
        "fetched_at": record.value.fetched_at.isoformat(),
        "source": record.value.source,
        "expires_at": record.expires_at.isoformat(),
    }
    return json.dumps(record_dict)


def load_record(data: str | bytes) -> CacheRecord:
    try:
        record_dict = json.loads(data)
        return CacheRecord(
            key=record_dict["key"],
            value=RateEntry(
                code=record_dict["code"],
                rate=Decimal(record_dict["rate"]),
                fetched_at=datetime.fromisoformat(record_dict["fetched_at"]),
                source=record_dict["source"],
            ),
            expires_at=datetime.fromisoformat(record_dict["expires_at"]),
        )
    except (ValueError, KeyError, TypeError, InvalidOperation) as e:
        raise CacheError(f"Invalid json data for cache record: {e}") from e
