import subprocess
import sys
from pathlib import Path

import pytest


def pytest_collect_file(parent, file_path: Path):
    """Run every example script as a test."""
    if file_path.suffix == ".py" and file_path.name != "conftest.py":
        return ExampleScript.from_parent(parent, path=file_path)


class ExampleScript(pytest.File):
    def collect(self):
        yield ExampleRun.from_parent(self, name=self.path.stem)


class ExampleRun(pytest.Item):
    def runtest(self):
        result = subprocess.run(
            [sys.executable, str(self.path)],
            capture_output=True,
            text=True,
            cwd=self.path.parent,
        )
        if result.returncode != 0:
            raise ExampleFailed(self.name, result)

    def repr_failure(self, excinfo):
        if isinstance(excinfo.value, ExampleFailed):
            return str(excinfo.value)
        return super().repr_failure(excinfo)

    def reportinfo(self):
        return self.path, 0, f"example: {self.path.name}"


class ExampleFailed(Exception):
    def __init__(self, name: str, result: subprocess.CompletedProcess):
        super().__init__(
            f"example {name} exited with {result.returncode}\n"
            f"stdout: {result.stdout}\n"
            f"stderr: {result.stderr}"
        )
