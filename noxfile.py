# Copyright (c) 2022 rawrepl contributors
# This software is distributed under the terms of the MIT License.
# type: ignore

import shutil
import configparser
from pathlib import Path
import nox


ROOT_DIR = Path(__file__).resolve().parent

CONFIG = configparser.ConfigParser()
CONFIG.read(ROOT_DIR / "setup.cfg")
EXTRAS_REQUIRE = dict(CONFIG["options.extras_require"])
assert EXTRAS_REQUIRE, "Config could not be read correctly"

PYTHONS = ["3.8", "3.9", "3.10"]
"""The newest supported Python shall be listed last."""

MYPY_VERSION = "0.961"

SRC_DIRS = [
    ROOT_DIR / "rawrepl",
    ROOT_DIR / "tests",
]

nox.options.error_on_external_run = True


@nox.session(python=False)
def clean(session):
    wildcards = [
        "dist",
        "build",
        "html*",
        ".coverage*",
        ".*cache",
        "*.egg-info",
        "*.log",
        "*.tmp",
        ".nox",
    ]
    for w in wildcards:
        for f in Path.cwd().glob(w):
            session.log(f"Removing: {f}")
            shutil.rmtree(f, ignore_errors=True)


@nox.session(python=PYTHONS, reuse_venv=True)
def test(session):
    session.log("Using the newest supported Python: %s", is_latest_python(session))
    session.install("-e", f".[{','.join(EXTRAS_REQUIRE.keys())}]")

    # The test suite writes log files and saves boards into temporary registries; keep the source tree clean.
    tmp_dir = Path(session.create_tmp()).resolve()
    session.cd(tmp_dir)
    fn = "setup.cfg"
    if not (tmp_dir / fn).exists():
        (tmp_dir / fn).symlink_to(ROOT_DIR / fn)

    env = {
        "PYTHONASYNCIODEBUG": "1",
        "PYTHONPATH": str(ROOT_DIR),
    }
    session.run("coverage", "run", "--rcfile", str(ROOT_DIR / fn), "-m", "pytest", *map(str, SRC_DIRS), env=env)

    # Coverage analysis and report.
    fail_under = 0 if session.posargs else 80
    session.run("coverage", "combine", "--rcfile", str(ROOT_DIR / fn))
    session.run("coverage", "report", "--rcfile", str(ROOT_DIR / fn), f"--fail-under={fail_under}")
    if session.interactive:
        session.run("coverage", "html", "--rcfile", str(ROOT_DIR / fn))
        report_file = Path.cwd().resolve() / "htmlcov" / "index.html"
        session.log(f"COVERAGE REPORT: file://{report_file}")


@nox.session(python=PYTHONS[-1], reuse_venv=True)
def mypy(session):
    session.install("-e", f".[{','.join(EXTRAS_REQUIRE.keys())}]")
    session.install("mypy == " + MYPY_VERSION)
    session.run(
        "mypy",
        "--config-file",
        str(ROOT_DIR / "setup.cfg"),
        "--strict",
        *map(str, SRC_DIRS),
        env={"PYTHONPATH": str(ROOT_DIR)},
    )


def is_latest_python(session) -> bool:
    return PYTHONS[-1] in session.run("python", "-V", silent=True)
