"""
Tests for the system update sweep.
"""

from conftest import FakeLocator
from src.core.updater import SystemUpdater
from src.models.catalog import UpdateCommand

UPDATES = [
    UpdateCommand(name="scoop", command=["scoop", "update", "*"]),
    UpdateCommand(name="winget", command=["winget", "upgrade", "--all"]),
    UpdateCommand(name="npm", command=["npm", "update", "-g"]),
]


class TestSystemUpdater:
    def test_skips_missing_package_managers(self, runner):
        locator = FakeLocator(present=["npm"])

        results = SystemUpdater(runner, locator).update_all(UPDATES)

        assert [r.skipped for r in results] == [True, True, False]
        assert runner.calls == [["npm", "update", "-g"]]

    def test_continues_past_failures(self, runner):
        runner.set_result(["scoop"], returncode=1, stderr="bucket error")
        locator = FakeLocator(present=["scoop", "winget", "npm"])

        results = SystemUpdater(runner, locator).update_all(UPDATES)

        assert [r.success for r in results] == [False, True, True]
        assert results[0].output == "bucket error"
        assert len(runner.calls) == 3

    def test_dry_run(self, runner):
        locator = FakeLocator(present=["scoop", "winget", "npm"])
        results = SystemUpdater(runner, locator, dry_run=True).update_all(UPDATES)
        assert all(r.success and not r.skipped for r in results)
        assert runner.calls == []
