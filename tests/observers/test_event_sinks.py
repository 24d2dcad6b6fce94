import json

from mesonode.observers.dispatcher import EventBus
from mesonode.observers.events import (
    ConfigWritten,
    PackageResolved,
    ProvisionSummary,
    ServiceActionFailedEvent,
    new_ctx,
)
from mesonode.observers.sinks import ConsoleObserver, JsonFileObserver, describe


class Boom:
    def notify(self, event):
        raise RuntimeError("observer exploded")


class Capture:
    def __init__(self):
        self.events = []

    def notify(self, event):
        self.events.append(event)


def _ctx():
    return new_ctx("test", "ubuntu-16.04", run_id="run-1")


def test_new_ctx_shape():
    ctx = new_ctx("prod", None)
    assert ctx["env"] == "prod"
    assert ctx["ts"].endswith("Z")
    assert ctx["run_id"]


def test_bus_keeps_going_when_an_observer_fails():
    cap = Capture()
    event = ConfigWritten(**_ctx(), target="master-quorum", path="/etc/mesos-master/quorum", changed=True)
    EventBus([Boom(), cap]).emit(event)
    assert cap.events == [event]


def test_json_file_observer_appends_lines(tmp_path):
    path = tmp_path / "audit" / "run-1.jsonl"
    sink = JsonFileObserver(path)
    sink.notify(PackageResolved(**_ctx(), package="mesos", requested="0.28", version="0.28.1-2.0.20"))
    sink.notify(ProvisionSummary(**_ctx(), roles=["master"], applied=7, failed=0, dry_run=False))

    rows = [json.loads(line) for line in path.read_text().splitlines()]
    assert [r["type"] for r in rows] == ["PackageResolved", "ProvisionSummary"]
    assert rows[0]["version"] == "0.28.1-2.0.20"
    assert rows[1]["run_id"] == "run-1"


def test_describe_lines():
    assert describe(
        ConfigWritten(**_ctx(), target="ensemble-myid", path="/etc/zookeeper/conf/myid", changed=False)
    ) == "ensemble-myid: /etc/zookeeper/conf/myid (unchanged)"
    assert describe(
        PackageResolved(**_ctx(), package="marathon", requested=None, version=None)
    ) == "marathon: latest -> latest"
    assert describe(
        ProvisionSummary(**_ctx(), roles=["agent"], applied=4, failed=0, dry_run=True)
    ) == "done (dry-run): 4 applied, 0 failed"


def test_console_sends_failures_to_stderr(capsys):
    ConsoleObserver().notify(
        ServiceActionFailedEvent(**_ctx(), service="master", unit="mesos-master", state="restarted", error="rc=1")
    )
    out, err = capsys.readouterr()
    assert out == ""
    assert "mesos-master: restarted FAILED: rc=1" in err
