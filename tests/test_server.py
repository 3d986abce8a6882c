import logging
import signal
import threading

import pytest
import requests

from serve import const, server


@pytest.fixture
def running(tmp_path):
    (tmp_path / "index.html").write_text("<h1>hello</h1>")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "data.txt").write_text("data")

    srv = server.bind(str(tmp_path), 0, 2, "127.0.0.1")
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()

    yield f"http://127.0.0.1:{srv.server_address[1]}"

    srv.shutdown()
    srv.server_close()
    thread.join(timeout=5)


def test_serve_index(running):
    res = requests.get(running + "/", timeout=5)
    assert res.status_code == 200
    assert res.text == "<h1>hello</h1>"


def test_serve_file(running):
    res = requests.get(running + "/sub/data.txt", timeout=5)
    assert res.status_code == 200
    assert res.text == "data"


def test_serve_not_found(running):
    res = requests.get(running + "/nope.html", timeout=5)
    assert res.status_code == 404
    assert res.text == const.NOT_FOUND_BODY
    assert res.headers["Content-Type"].startswith("text/html")


def test_serve_many_requests(running):
    for _ in range(10):
        assert requests.get(running + "/sub/data.txt", timeout=5).status_code == 200


def test_serve_logs_requests(running, caplog):
    caplog.set_level(logging.INFO, logger="serve.server")
    requests.get(running + "/sub/data.txt", timeout=5)
    assert any("GET /sub/data.txt" in r.getMessage() for r in caplog.records)


def test_bind_requires_directory(tmp_path):
    file = tmp_path / "file.txt"
    file.write_text("")
    with pytest.raises(NotADirectoryError):
        server.bind(str(file), 0, 1, "127.0.0.1")


def test_bind_port_out_of_range(tmp_path):
    with pytest.raises(OverflowError):
        server.bind(str(tmp_path), 70000, 1, "127.0.0.1")


# --- Workers ---------------------------------------------------------------- #


@pytest.fixture
def forks(monkeypatch):
    pids = []

    def fakeFork():
        pid = pids.pop(0)
        return pid

    monkeypatch.setattr(server.os, "fork", fakeFork, raising=False)
    return pids


def test_fork_parent(forks):
    forks.extend([101, 102])
    assert server._fork(3) == (True, [101, 102])
    assert forks == []


def test_fork_child(forks):
    forks.extend([101, 0, 103])
    assert server._fork(4) == (False, [])
    assert forks == [103]


def test_fork_single_worker(forks):
    forks.append(101)
    assert server._fork(1) == (True, [])
    assert server._fork(0) == (True, [])
    assert server._fork(-2) == (True, [])
    assert forks == [101]


def test_fork_unsupported(monkeypatch, caplog):
    monkeypatch.delattr(server.os, "fork", raising=False)
    assert server._fork(3) == (True, [])
    assert any("not supported" in r.getMessage() for r in caplog.records)


def test_reap(monkeypatch):
    killed = []
    waited = []

    def fakeKill(pid, sig):
        if pid == 102:
            raise ProcessLookupError()
        killed.append((pid, sig))

    def fakeWaitpid(pid, options):
        waited.append(pid)
        return pid, 0

    monkeypatch.setattr(server.os, "kill", fakeKill)
    monkeypatch.setattr(server.os, "waitpid", fakeWaitpid)

    server._reap([101, 102])
    assert killed == [(101, signal.SIGTERM)]
    assert waited == [101, 102]
