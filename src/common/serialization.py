"""Serialization utilities."""

from dataclasses import asdict
from datetime import datetime
from typing import Mapping

from common.datetime import to_iso


def serialize_dataclass(obj, aliases: Mapping[str, str] | None = None) -> dict:
    """Serialize a dataclass to dict, converting datetimes to ISO strings.

    Keys listed in `aliases` are renamed in the output (e.g. ``pub_date`` ->
    ``pubDate``) so records keep the snapshot file field names.
    """
    data = asdict(obj)
    for key, value in data.items():
        if isinstance(value, datetime):
            data[key] = to_iso(value)
        elif isinstance(value, dict):
            for k, v in value.items():
                if isinstance(v, datetime):
                    value[k] = to_iso(v)
    if aliases:
        data = {aliases.get(key, key): value for key, value in data.items()}
    return data
