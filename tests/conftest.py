import os
import sys
from unittest.mock import MagicMock, patch

import pytest

# Ensure we can import from the parent directory
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from selfbuild.models import BuildConfig

MODULE_HEADER = [
    "/*",
    " * License text",
    " */",
    "",
]


def write_module(path, imports, body, sentinel):
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = MODULE_HEADER + list(imports) + ["", sentinel] + list(body)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def config(tmp_path):
    return BuildConfig(root=tmp_path)


@pytest.fixture
def project(config):
    """A source tree holding the three default modules."""
    sentinel = config.generated_sentinel
    main = config.source_main_dir
    write_module(
        main / "Command.java",
        ["import java.util.List;", "import java.nio.file.Path;"],
        ["interface Command {}"],
        sentinel,
    )
    write_module(
        main / "Util.java",
        ["import java.nio.file.Path;", "import java.nio.file.Files;"],
        ["interface Util {}"],
        sentinel,
    )
    write_module(
        main / "Bundle.java",
        ["import java.util.List;"],
        ["class Bundle {", "}"],
        sentinel,
    )
    return config


@pytest.fixture
def mock_session():
    """requests.Session stand-in serving one small payload per GET."""
    session = MagicMock()
    response = MagicMock()
    response.iter_content.return_value = [b"PK", b"\x03\x04"]
    session.get.return_value.__enter__.return_value = response
    return session


@pytest.fixture
def mock_run():
    with patch("selfbuild.command.subprocess.run") as run:
        run.return_value = MagicMock(returncode=0, stdout="", stderr="")
        yield run
