from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from tfharness.infrastructure import commands

SAMPLE_PLAN: dict[str, Any] = {
    "format_version": "1.2",
    "terraform_version": "1.7.5",
    "variables": {"region": {"value": "eu-west-2"}},
    "resource_changes": [
        {
            "address": "aws_s3_bucket.logs",
            "mode": "managed",
            "type": "aws_s3_bucket",
            "name": "logs",
            "provider_name": "registry.terraform.io/hashicorp/aws",
            "change": {
                "actions": ["create"],
                "before": None,
                "after": {"bucket": "logs-bucket"},
            },
        },
        {
            "address": "module.net.aws_vpc.main",
            "module_address": "module.net",
            "mode": "managed",
            "type": "aws_vpc",
            "name": "main",
            "change": {"actions": ["delete", "create"]},
        },
    ],
    "output_changes": {
        "bucket_name": {"actions": ["create"], "after": "logs-bucket"},
    },
}


def _subcommand(argv: Sequence[str]) -> str:
    return next(arg for arg in argv[1:] if not arg.startswith("-"))


def _switch_value(argv: Sequence[str], switch: str) -> str | None:
    prefix = f"{switch}="
    for arg in argv:
        if arg.startswith(prefix):
            return arg[len(prefix) :]
    return None


@dataclass
class FakeTerraform:
    """Stand-in for the terraform binary driven through ``subprocess.run``."""

    show_output: str = field(default_factory=lambda: json.dumps(SAMPLE_PLAN))
    exit_codes: dict[str, int] = field(default_factory=dict)
    calls: list[list[str]] = field(default_factory=list)
    inputs: list[str | None] = field(default_factory=list)
    directory_at_init: list[str] | None = None

    def run(
        self,
        argv: Sequence[str],
        input: str | None = None,
        capture_output: bool = False,
        text: bool = False,
        check: bool = False,
    ) -> SimpleNamespace:
        self.calls.append(list(argv))
        self.inputs.append(input)
        subcommand = _subcommand(argv)
        chdir = Path(_switch_value(argv, "-chdir") or ".")

        returncode = self.exit_codes.get(subcommand, 0)
        if returncode not in (0, 2):
            return SimpleNamespace(
                returncode=returncode, stdout="", stderr=f"{subcommand} failed"
            )

        stdout = ""
        if subcommand == "init":
            self.directory_at_init = (
                sorted(entry.name for entry in chdir.iterdir()) if chdir.exists() else None
            )
        elif subcommand == "plan":
            out = _switch_value(argv, "-out")
            if out:
                (chdir / out).write_text("binary plan", encoding="utf-8")
        elif subcommand == "show":
            stdout = self.show_output
        return SimpleNamespace(returncode=returncode, stdout=stdout, stderr="")

    def calls_for(self, subcommand: str) -> list[list[str]]:
        return [call for call in self.calls if _subcommand(call) == subcommand]


@pytest.fixture()
def fake_terraform(monkeypatch: pytest.MonkeyPatch) -> FakeTerraform:
    fake = FakeTerraform()
    monkeypatch.setattr(commands, "subprocess", SimpleNamespace(run=fake.run))
    return fake


@pytest.fixture()
def sample_plan() -> dict[str, Any]:
    return json.loads(json.dumps(SAMPLE_PLAN))
