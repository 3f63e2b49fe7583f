"""Builders for fake API payloads."""
import json


class FakeResponse:
    def __init__(self, payload):
        if isinstance(payload, bytes):
            self._raw = payload
        elif isinstance(payload, str):
            self._raw = payload.encode("utf-8")
        else:
            self._raw = json.dumps(payload).encode("utf-8")

    def read(self):
        return self._raw

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def envelope(items, result_code="00", result_msg="NORMAL_SERVICE", total=None):
    """Build an API envelope around `items`."""
    return {
        "response": {
            "header": {"resultCode": result_code, "resultMsg": result_msg},
            "body": {
                "dataType": "JSON",
                "items": {"item": items} if items else "",
                "pageNo": 1,
                "numOfRows": 10,
                "totalCount": len(items) if total is None else total,
            },
        }
    }
