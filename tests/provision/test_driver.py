import subprocess

import pytest

from mesonode.backends.apt import AptBackend
from mesonode.backends.services import UpstartServices
from mesonode.config.models import FamilySettings, PathTable, ProvisionSettings
from mesonode.errors import CommandFailed, NoMatchingVersion, ProvisionError, ServiceActionFailed
from mesonode.execution.runner import CommandRunner
from mesonode.observers.dispatcher import EventBus
from mesonode.observers.events import (
    ConfigWritten,
    PackageResolved,
    PlanComputed,
    PlanFailed,
    ProvisionSummary,
    ServiceActionFailedEvent,
)
from mesonode.provision.driver import ProvisioningDriver, render_config
from mesonode.provision.request import build_request
from mesonode.roles.models import ConfigTarget
from mesonode.system.files import AtomicFileWriter

MASTERS = "10.0.0.1,10.0.0.2,10.0.0.3"
MESOS = ["0.27.2-2.0.15", "0.28.0-2.0.16", "0.28.1-2.0.20", "1.0.0-2.0.89"]


class FakeBackend:
    """Records every call; services flip in-memory state."""

    def __init__(self, family="apt", bundled=True, catalog=None, running=(), fail_on=None):
        self.family = family
        self.ensemble_bundled = bundled
        self.catalog = catalog or {}
        self.running = set(running)
        self.fail_on = fail_on
        self.calls = []

    def _record(self, *call):
        self.calls.append(call)
        if call == self.fail_on:
            raise CommandFailed(list(call), 1, "boom")

    def refresh_catalog(self):
        self._record("refresh")

    def list_available_versions(self, package):
        self._record("list", package)
        return list(self.catalog.get(package, []))

    def install_exact(self, package, version):
        self._record("install", package, version)

    def install_latest(self, package):
        self._record("install", package, None)

    def is_service_running(self, service):
        return service in self.running

    def start_service(self, service):
        self._record("start", service)
        self.running.add(service)

    def stop_service(self, service):
        self._record("stop", service)
        self.running.discard(service)

    def restart_service(self, service):
        self._record("restart", service)
        self.running.add(service)

    def enable_service(self, service):
        self._record("enable", service)

    def disable_service(self, service):
        self._record("disable", service)
        self.running.discard(service)


class Capture:
    def __init__(self):
        self.events = []

    def notify(self, event):
        self.events.append(event)

    def of(self, cls):
        return [e for e in self.events if isinstance(e, cls)]


def _settings(tmp_path):
    paths = PathTable(**{name: tmp_path / name for name in PathTable.model_fields})
    return ProvisionSettings(
        families={
            "apt": FamilySettings(paths=paths),
            "yum": FamilySettings(paths=paths, ensemble_package="mesosphere-zookeeper"),
        },
        log_dir=tmp_path / "logs",
    )


def _driver(tmp_path, request, backend, *, dry_run=False):
    capture = Capture()
    driver = ProvisioningDriver(
        request,
        backend,
        settings=_settings(tmp_path),
        writer=AtomicFileWriter(dry_run=dry_run),
        bus=EventBus([capture]),
        run_id="run-1",
    )
    return driver, capture


def _service_calls(backend):
    return [c for c in backend.calls if c[0] in ("start", "stop", "restart", "enable", "disable")]


def test_clustered_master_end_to_end(tmp_path):
    request = build_request(
        ["master"], masters=MASTERS, ip="10.0.0.2", hostname="node-2.example", mesos="0.28"
    )
    backend = FakeBackend(catalog={"mesos": MESOS})
    driver, capture = _driver(tmp_path, request, backend)

    report = driver.run()

    assert (tmp_path / "connection_string").read_text() == (
        "zk://10.0.0.1:2181,10.0.0.2:2181,10.0.0.3:2181/mesos\n"
    )
    assert (tmp_path / "ensemble_myid").read_text() == "2\n"
    assert (tmp_path / "master_quorum").read_text() == "2\n"
    assert (tmp_path / "ensemble_peers").read_text().endswith(
        "server.1=10.0.0.1:2888:3888\n"
        "server.2=10.0.0.2:2888:3888\n"
        "server.3=10.0.0.3:2888:3888\n"
    )
    assert (tmp_path / "master_hostname").read_text() == "node-2.example\n"
    assert (tmp_path / "orchestrator_hostname").read_text() == "node-2.example\n"
    assert not (tmp_path / "agent_hostname").exists()

    assert ("install", "mesos", "0.28.1-2.0.20") in backend.calls
    assert ("install", "marathon", None) in backend.calls
    # marathon had no version request, so its listing is never read
    assert ("list", "marathon") not in backend.calls

    first_service = backend.calls.index(_service_calls(backend)[0])
    last_install = max(i for i, c in enumerate(backend.calls) if c[0] == "install")
    assert last_install < first_service

    services = _service_calls(backend)
    assert ("enable", "zookeeper") in services
    assert ("start", "zookeeper") in services
    assert ("disable", "mesos-slave") in services
    assert ("disable", "mesos-master") not in services
    assert ("disable", "zookeeper") not in services
    assert services[-4:] == [
        ("enable", "mesos-master"),
        ("restart", "mesos-master"),
        ("enable", "marathon"),
        ("restart", "marathon"),
    ]

    assert report.applied == [a.describe() for a in report.plan]
    assert isinstance(capture.events[0], PlanComputed)
    resolved = capture.of(PackageResolved)[0]
    assert (resolved.package, resolved.requested, resolved.version) == ("mesos", "0.28", "0.28.1-2.0.20")
    summary = capture.of(ProvisionSummary)[0]
    assert summary.failed == 0 and summary.applied == len(report.plan)


def test_running_ensemble_is_not_started_again(tmp_path):
    backend = FakeBackend(running={"zookeeper"})
    driver, _ = _driver(tmp_path, build_request(["master"]), backend)
    driver.run()
    assert ("enable", "zookeeper") in backend.calls
    assert ("start", "zookeeper") not in backend.calls


def test_unknown_version_aborts_before_anything_is_touched(tmp_path):
    request = build_request(["master"], mesos="2.0")
    backend = FakeBackend(catalog={"mesos": MESOS})
    driver, capture = _driver(tmp_path, request, backend)

    with pytest.raises(NoMatchingVersion) as ei:
        driver.run()

    assert "0.28.1-2.0.20" in str(ei.value)
    assert backend.calls == [("refresh",), ("list", "mesos")]
    assert list(tmp_path.iterdir()) == []
    assert len(capture.of(PlanFailed)) == 1


def test_agent_on_apt_switches_master_and_ensemble_off(tmp_path):
    backend = FakeBackend(running={"mesos-master", "zookeeper"})
    driver, _ = _driver(tmp_path, build_request(["agent"], masters=MASTERS), backend)
    driver.run()

    assert _service_calls(backend) == [
        ("disable", "mesos-master"),
        ("disable", "zookeeper"),
        ("enable", "mesos-slave"),
        ("restart", "mesos-slave"),
    ]
    assert [c for c in backend.calls if c[0] == "install"] == [("install", "mesos", None)]
    assert (tmp_path / "connection_string").read_text() == (
        "zk://10.0.0.1:2181,10.0.0.2:2181,10.0.0.3:2181/mesos\n"
    )
    assert not (tmp_path / "ensemble_myid").exists()


def test_agent_on_yum_leaves_ensemble_alone(tmp_path):
    backend = FakeBackend(family="yum", bundled=False)
    driver, _ = _driver(tmp_path, build_request(["agent"]), backend)
    driver.run()
    assert ("disable", "zookeeper") not in backend.calls
    assert ("install", "mesosphere-zookeeper", None) not in backend.calls


def test_master_on_yum_installs_ensemble_package(tmp_path):
    backend = FakeBackend(family="yum", bundled=False)
    driver, _ = _driver(tmp_path, build_request(["master"]), backend)
    driver.run()
    assert ("install", "mesosphere-zookeeper", None) in backend.calls


def test_master_and_agent_disable_nothing(tmp_path):
    backend = FakeBackend()
    request = build_request(["master", "agent"], masters=MASTERS, ip="10.0.0.1", hostname="n1")
    driver, _ = _driver(tmp_path, request, backend)
    driver.run()
    assert not [c for c in backend.calls if c[0] == "disable"]
    assert ("restart", "mesos-slave") in backend.calls
    assert (tmp_path / "agent_hostname").read_text() == "n1\n"


def test_failing_service_action_stops_the_run(tmp_path):
    backend = FakeBackend(fail_on=("restart", "mesos-master"))
    driver, capture = _driver(tmp_path, build_request(["master"]), backend)

    with pytest.raises(ServiceActionFailed) as ei:
        driver.run()

    assert ei.value.service == "mesos-master"
    assert ("restart", "marathon") not in backend.calls
    failed = capture.of(ServiceActionFailedEvent)
    assert failed and failed[0].unit == "mesos-master"
    assert capture.of(ProvisionSummary)[0].failed == 1


def test_second_run_changes_no_files(tmp_path):
    request = build_request(["master"], masters=MASTERS, ip="10.0.0.1", hostname="n1")

    driver, _ = _driver(tmp_path, request, FakeBackend())
    driver.run()
    before = {p.name: p.read_text() for p in tmp_path.iterdir() if p.is_file()}

    driver, capture = _driver(tmp_path, request, FakeBackend())
    driver.run()
    after = {p.name: p.read_text() for p in tmp_path.iterdir() if p.is_file()}

    assert before == after
    assert capture.of(ConfigWritten)
    assert not any(e.changed for e in capture.of(ConfigWritten))


def test_dry_run_writes_nothing(tmp_path):
    request = build_request(["master"], dry_run=True)
    driver, capture = _driver(tmp_path, request, FakeBackend(), dry_run=True)
    driver.run()
    assert list(tmp_path.iterdir()) == []
    assert capture.of(ProvisionSummary)[0].dry_run is True


def test_render_zoo_cfg_keeps_unrelated_settings(tmp_path):
    request = build_request(["master"], masters=MASTERS, ip="10.0.0.1")
    settings = _settings(tmp_path)
    existing = "tickTime=3000\nserver.1=192.168.0.1:2888:3888\n"

    content = render_config(
        ConfigTarget.ENSEMBLE_PEERS,
        request=request,
        settings=settings,
        family=settings.family("apt"),
        existing=existing,
    )
    assert content == (
        "tickTime=3000\n"
        "server.1=10.0.0.1:2888:3888\n"
        "server.2=10.0.0.2:2888:3888\n"
        "server.3=10.0.0.3:2888:3888\n"
    )


def test_shrinking_to_single_node_drops_old_peer_lines(tmp_path):
    clustered = build_request(["master"], masters=MASTERS, ip="10.0.0.1")
    driver, _ = _driver(tmp_path, clustered, FakeBackend())
    driver.run()
    assert "server.3=10.0.0.3:2888:3888" in (tmp_path / "ensemble_peers").read_text()

    driver, _ = _driver(tmp_path, build_request(["master"]), FakeBackend())
    driver.run()

    zoo = (tmp_path / "ensemble_peers").read_text()
    assert "server." not in zoo
    assert "clientPort=2181\n" in zoo
    assert (tmp_path / "connection_string").read_text() == "zk://localhost:2181/mesos\n"
    assert (tmp_path / "ensemble_myid").read_text() == "1\n"
    assert (tmp_path / "master_quorum").read_text() == "1\n"


def test_restarted_services_are_enabled_first(tmp_path):
    backend = FakeBackend()
    driver, _ = _driver(tmp_path, build_request(["master"]), backend)
    driver.run()

    services = _service_calls(backend)
    for unit in ("mesos-master", "marathon"):
        assert services.index(("enable", unit)) < services.index(("restart", unit))


def test_override_write_error_fails_the_service_action(tmp_path, monkeypatch):
    monkeypatch.setattr(
        subprocess, "run", lambda argv, **kwargs: subprocess.CompletedProcess(argv, 0, "", "")
    )
    not_a_dir = tmp_path / "init"
    not_a_dir.write_text("")
    runner = CommandRunner()
    backend = AptBackend(runner, UpstartServices(runner, AtomicFileWriter(), override_dir=not_a_dir))
    driver, capture = _driver(tmp_path, build_request(["master"]), backend)

    with pytest.raises(ServiceActionFailed) as ei:
        driver.run()

    assert ei.value.service == "mesos-slave"
    assert isinstance(ei.value.cause, OSError)
    assert capture.of(ServiceActionFailedEvent)[0].unit == "mesos-slave"
    assert capture.of(ProvisionSummary)[0].failed == 1


def test_undecodable_zoo_cfg_is_a_provision_error(tmp_path):
    (tmp_path / "ensemble_peers").write_bytes(b"tickTime=2000\n\xff\xfe\n")
    driver, capture = _driver(tmp_path, build_request(["master"]), FakeBackend())

    with pytest.raises(ProvisionError) as ei:
        driver.run()

    assert "ensemble_peers" in str(ei.value)
    assert isinstance(ei.value.__cause__, UnicodeDecodeError)
    assert capture.of(ProvisionSummary)[0].failed == 1
