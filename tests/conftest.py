import logging
import os
import sys
from pathlib import Path

import pytest
import yaml

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'docfold' and tests/helpers importable as 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from helpers.files import write  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_docfold_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop DOCFOLD_* variables from the developer's shell so env layers are empty."""
    for key in list(os.environ.keys()):
        if key.startswith("DOCFOLD_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_docfold_logging():
    """Drop the CLI handler after each test; its stream belongs to that test's capture."""
    yield
    logger = logging.getLogger("docfold")
    for handler in list(logger.handlers):
        if handler.get_name() == "docfold-cli":
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


THEME_DOCUS = """\
docus:
  title: Docus
  layout: default
  header:
    logo: false
    showLinkIcon: false
    exclude: []
    fluid: false
  aside:
    level: 0
    collapsed: false
    exclude: [/changelog]
  github:
    branch: main
    edit: false
"""

THEME_TYPOGRAPHY = """\
prose:
  copyButton:
    iconCopy: ph:copy
    iconCopied: ph:check
  headings:
    icon: ph:link
"""

SITE_APP_CONFIG = """\
docus:
  title: Vekos
  description: The Future of Verified and Secure Computing
  socials:
    github: JGiraldo29/vekos
  github:
    dir: docs
    branch: main
    repo: vekos
    owner: JGiraldo29
    edit: true
  aside:
    level: 0
    collapsed: false
    exclude: []
  main:
    padded: true
    fluid: true
  header:
    logo: true
    showLinkIcon: true
    exclude: []
    fluid: true
"""


@pytest.fixture
def site_project(tmp_path: Path) -> Path:
    """A documentation site with two theme layers and its own app config."""
    root = tmp_path / "site"
    write(root / "themes" / "docus" / "app.config.yaml", THEME_DOCUS)
    write(root / "themes" / "typography" / "app.config.yml", THEME_TYPOGRAPHY)
    write(root / "app.config.yaml", SITE_APP_CONFIG)
    write(
        root / "docfold.yaml",
        "layers:\n"
        "  - {id: typography, path: themes/typography/app.config.yml}\n"
        "  - {id: docus, path: themes/docus/app.config.yaml}\n"
        "  - {id: site, path: app.config.yaml}\n"
        "schema: app-config\n",
    )
    return root


@pytest.fixture
def site_config_payload() -> dict:
    """The site's own app config as a parsed mapping."""
    return yaml.safe_load(SITE_APP_CONFIG)
