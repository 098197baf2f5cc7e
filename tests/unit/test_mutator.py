from pathlib import Path

import pyroute2
import pytest

from static_routes import mutator as mutator_module
from static_routes.exceptions import (
    Killed,
    NetlinkFailed,
    NonZeroExit,
    RouteError,
    SpawnFailed,
    Timeout,
)
from static_routes.mutator import CommandRouteMutator, NetlinkRouteMutator, RouteAction


def make_command(tmp_path: Path, body: str) -> str:
    script = tmp_path / "route"
    script.write_text("#!/bin/sh\n" + body + "\n")
    script.chmod(0o755)
    return str(script)


def test_command_receives_action_destination_gateway(tmp_path: Path):
    args_file = tmp_path / "args"
    command = make_command(tmp_path, f'printf "%s\\n" "$@" > {args_file}\necho noise')
    mutator = CommandRouteMutator(command)

    mutator.apply(RouteAction.ADD, "10.0.0.0/24", "192.0.2.1")
    assert args_file.read_text().split() == ["add", "10.0.0.0/24", "192.0.2.1"]

    mutator.remove("10.0.0.0/24", "192.0.2.1")
    assert args_file.read_text().split() == ["delete", "10.0.0.0/24", "192.0.2.1"]


def test_non_zero_exit(tmp_path: Path):
    mutator = CommandRouteMutator(make_command(tmp_path, "exit 3"))

    with pytest.raises(NonZeroExit) as excinfo:
        mutator.add("10.0.0.0/24", "192.0.2.1")

    assert excinfo.value.code == 3
    assert isinstance(excinfo.value, RouteError)


def test_killed_by_signal(tmp_path: Path):
    mutator = CommandRouteMutator(make_command(tmp_path, "kill -9 $$"))

    with pytest.raises(Killed) as excinfo:
        mutator.add("10.0.0.0/24", "192.0.2.1")

    assert excinfo.value.signal == 9


def test_spawn_failure(tmp_path: Path):
    mutator = CommandRouteMutator(str(tmp_path / "missing-route"))

    with pytest.raises(SpawnFailed):
        mutator.add("10.0.0.0/24", "192.0.2.1")


def test_timeout(tmp_path: Path):
    mutator = CommandRouteMutator(make_command(tmp_path, "exec sleep 5"), timeout=0.2)

    with pytest.raises(Timeout):
        mutator.add("10.0.0.0/24", "192.0.2.1")


class FakeIPRoute:
    calls: list = []
    error = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def route(self, command, **kwargs):
        FakeIPRoute.calls.append((command, kwargs))
        if FakeIPRoute.error is not None:
            raise FakeIPRoute.error


def test_netlink_mutator_programs_route(monkeypatch):
    FakeIPRoute.calls = []
    FakeIPRoute.error = None
    monkeypatch.setattr(mutator_module.pyroute2, "IPRoute", FakeIPRoute)

    NetlinkRouteMutator().add("2001:db8::/32", "fe80::1")

    command, kwargs = FakeIPRoute.calls[0]
    assert command == "add"
    assert kwargs["dst"] == "2001:db8::"
    assert kwargs["dst_len"] == 32
    assert kwargs["gateway"] == "fe80::1"


def test_netlink_error_is_route_error(monkeypatch):
    FakeIPRoute.calls = []
    FakeIPRoute.error = pyroute2.NetlinkError(17, "File exists")
    monkeypatch.setattr(mutator_module.pyroute2, "IPRoute", FakeIPRoute)

    with pytest.raises(NetlinkFailed) as excinfo:
        NetlinkRouteMutator().remove("10.0.0.0/24", "192.0.2.1")

    assert excinfo.value.code == 17
    assert FakeIPRoute.calls[0][0] == "del"
