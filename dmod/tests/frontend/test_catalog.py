#  SPDX-License-Identifier: MIT OR Apache-2.0
#  Copyright (c) 2026 gwz

import pytest

from dm_args import InvalidConfigurationError
from dm_descriptor import ThirdPartyEntry
from dm_third_party import ThirdPartyCatalog


def test_lookup_known_and_unknown(catalog):
    assert catalog.lookup("zlib") == ThirdPartyEntry(
        include_dirs=("/usr/include",), link_dirs=("/usr/lib",), libraries=("z",)
    )
    assert catalog.lookup("core") is None
    assert "boost" in catalog
    assert catalog.names() == ["boost", "zlib"]


def test_load_from_json(write_file):
    path = write_file(
        "third_party.json",
        """
        {
            "zlib": {"include_dirs": ["/usr/include"], "link_dirs": ["/usr/lib"], "libraries": ["z"]},
            "pthread": {"libraries": "pthread"}
        }
        """,
    )

    catalog = ThirdPartyCatalog.from_json_files([path])

    assert catalog.lookup("zlib").libraries == ("z",)
    assert catalog.lookup("pthread") == ThirdPartyEntry(libraries=("pthread",))


def test_later_files_override_earlier_ones(write_file):
    first = write_file("a.json", '{"zlib": {"libraries": ["z"]}}')
    second = write_file("b.json", '{"zlib": {"libraries": ["zlibstatic"]}}')

    catalog = ThirdPartyCatalog.from_json_files([first, second])

    assert catalog.lookup("zlib").libraries == ("zlibstatic",)


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '["zlib"]',
        '{"zlib": ["z"]}',
        '{"zlib": {"libs": ["z"]}}',
        '{"zlib": {"libraries": [1, 2]}}',
    ],
)
def test_malformed_catalog_is_invalid_configuration(write_file, content):
    path = write_file("bad.json", content)

    with pytest.raises(InvalidConfigurationError) as exc:
        ThirdPartyCatalog.from_json_files([path])

    assert "[CFG-0050]" in exc.value.message
    assert exc.value.filename == str(path)


def test_missing_catalog_file(tmp_path):
    with pytest.raises(InvalidConfigurationError) as exc:
        ThirdPartyCatalog.from_json_files([tmp_path / "missing.json"])

    assert "[CFG-0050]" in exc.value.message


def test_catalog_that_is_not_utf8(tmp_path):
    path = tmp_path / "latin1.json"
    path.write_bytes(b'{"z\xff": {}}')

    with pytest.raises(InvalidConfigurationError) as exc:
        ThirdPartyCatalog.from_json_files([path])

    assert "[CFG-0050]" in exc.value.message
    assert exc.value.filename == str(path)
