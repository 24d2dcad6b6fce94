from mesonode.system.files import AtomicFileWriter


def test_write_creates_parents_and_reports_change(tmp_path):
    target = tmp_path / "etc" / "mesos" / "zk"
    writer = AtomicFileWriter()

    assert writer.write(target, "zk://localhost:2181/mesos\n") is True
    assert target.read_text() == "zk://localhost:2181/mesos\n"
    assert writer.write(target, "zk://localhost:2181/mesos\n") is False
    # no temp files left behind
    assert [p.name for p in target.parent.iterdir()] == ["zk"]


def test_write_replaces_content(tmp_path):
    target = tmp_path / "quorum"
    target.write_text("1\n")
    assert AtomicFileWriter().write(target, "2\n") is True
    assert target.read_text() == "2\n"
    assert oct(target.stat().st_mode & 0o777) == oct(0o644)


def test_dry_run_touches_nothing(tmp_path):
    target = tmp_path / "etc" / "myid"
    writer = AtomicFileWriter(dry_run=True)
    assert writer.write(target, "1\n") is True
    assert not target.exists()
    assert not target.parent.exists()


def test_read_and_remove(tmp_path):
    writer = AtomicFileWriter()
    target = tmp_path / "zookeeper.override"
    assert writer.read(target) is None
    assert writer.remove(target) is False

    target.write_text("manual\n")
    assert writer.read(target) == "manual\n"
    assert writer.remove(target) is True
    assert not target.exists()
