import json
from pathlib import Path

import pytest

from metadata_builders import metadata


@pytest.fixture
def write_metadata(tmp_path: Path):
    """Write a `cargo metadata` document named after its workspace label."""

    def _write(label, members, others=()):
        path = tmp_path / f"{label}.json"
        path.write_text(json.dumps(metadata(members, others)), encoding="utf-8")
        return path

    return _write
