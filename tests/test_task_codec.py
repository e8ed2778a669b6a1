# tests/test_task_codec.py

from __future__ import annotations

import json

import pytest

from todolist.core.errors import CorruptDataError
from todolist.tasks.task_codec import decode_tasks, encode_tasks, is_encodable
from todolist.tasks.task_models import Task


def test_encode_is_compact_json_array_of_records() -> None:
    tasks = [Task(id="1", text="Buy milk", completed=False), Task(id="2", text="Café", completed=True)]

    raw = encode_tasks(tasks)

    assert json.loads(raw.decode("utf-8")) == [
        {"id": "1", "text": "Buy milk", "completed": False},
        {"id": "2", "text": "Café", "completed": True},
    ]
    assert "Café".encode("utf-8") in raw
    assert encode_tasks([]) == b"[]"


def test_decode_accepts_data_written_by_the_mobile_app() -> None:
    # Older data: untrimmed text, Date.now() string ids, numeric ids, extra keys.
    raw = (
        b'[{"id":"1700000000000","text":"Buy milk ","completed":false},'
        b'{"id":1700000000001,"text":"Walk dog","completed":true,"color":"red"}]'
    )

    assert decode_tasks(raw) == [
        Task(id="1700000000000", text="Buy milk", completed=False),
        Task(id="1700000000001", text="Walk dog", completed=True),
    ]


def test_decode_accepts_str_input() -> None:
    assert decode_tasks('[{"id":"a","text":"x","completed":false}]') == [Task(id="a", text="x")]


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"\xff\xfe not utf-8",
        b"not json",
        b'{"id":"1","text":"x","completed":false}',
        b"null",
        b'["just a string"]',
        b'[{"text":"no id","completed":false}]',
        b'[{"id":"","text":"empty id","completed":false}]',
        b'[{"id":true,"text":"bool id","completed":false}]',
        b'[{"id":"1","completed":false}]',
        b'[{"id":"1","text":"   ","completed":false}]',
        b'[{"id":"1","text":"x"}]',
        b'[{"id":"1","text":"x","completed":"yes"}]',
        b'[{"id":"1","text":"a","completed":false},{"id":"1","text":"b","completed":true}]',
    ],
)
def test_decode_rejects_invalid_data(raw: bytes) -> None:
    with pytest.raises(CorruptDataError):
        decode_tasks(raw)


@pytest.mark.parametrize(
    "raw",
    [
        b"[" * 100000,
        b'[{"id":' + b"9" * 5000 + b',"text":"x","completed":false}]',
        b'[{"id":"1","text":"a\\ud800","completed":false}]',
        b'[{"id":"\\udfff","text":"a","completed":false}]',
    ],
)
def test_decode_rejects_hostile_data_as_corrupt(raw: bytes) -> None:
    with pytest.raises(CorruptDataError):
        decode_tasks(raw)


def test_is_encodable() -> None:
    assert is_encodable("Café ☕") is True
    assert is_encodable("lone \ud800") is False
