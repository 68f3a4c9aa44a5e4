import asyncio
import csv

import pytest

from linkharvest.errors import SinkError
from linkharvest.storage import CSVSink


def read_rows(path):
    with open(path, newline='', encoding='utf-8') as f:
        return list(csv.reader(f))


def test_writes_header_and_rows_in_order(tmp_path):
    path = tmp_path / "links.csv"
    urls = ["https://a.test/", "https://b.test/x?q=1,2", "https://c.test/\"quoted\""]

    asyncio.run(CSVSink(path).write(urls))

    assert read_rows(path) == [["URL"]] + [[u] for u in urls]


def test_empty_result_writes_header_only(tmp_path):
    path = tmp_path / "links.csv"
    asyncio.run(CSVSink(path).write([]))
    assert path.read_text(encoding='utf-8') == "URL\n"


def test_existing_file_is_truncated(tmp_path):
    path = tmp_path / "links.csv"
    sink = CSVSink(path)

    asyncio.run(sink.write(["https://a.test/", "https://b.test/"]))
    asyncio.run(sink.write(["https://c.test/"]))

    assert read_rows(path) == [["URL"], ["https://c.test/"]]


def test_missing_parent_directories_are_created(tmp_path):
    path = tmp_path / "nested" / "dir" / "links.csv"
    asyncio.run(CSVSink(path).write(["https://a.test/"]))
    assert path.exists()


def test_unwritable_destination_raises_sink_error(tmp_path):
    sink = CSVSink(tmp_path)  # a directory, not a file

    with pytest.raises(SinkError) as excinfo:
        asyncio.run(sink.write(["https://a.test/"]))

    assert isinstance(excinfo.value.cause, OSError)
    assert excinfo.value.path == tmp_path


def test_default_path():
    assert str(CSVSink().path) == "collected_links.csv"
