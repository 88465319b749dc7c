import json
from pathlib import Path

from neutralipc.core.config import load_options, options_from_uri, read_config_file
from neutralipc.core.models import ConnectionOptions


def test_defaults_without_file(tmp_path: Path) -> None:
    options = load_options(str(tmp_path / "missing.json"))

    assert options == ConnectionOptions()
    assert options.host == "127.0.0.1"
    assert options.port == 4273
    assert options.timeout == 10
    assert options.buffer_size == 8192


def test_values_from_file(tmp_path: Path) -> None:
    path = tmp_path / "neutral-ipc-cfg.json"
    path.write_text(json.dumps({"host": "10.1.2.3", "port": 5000, "other": True}))

    options = load_options(str(path))

    assert options == ConnectionOptions(host="10.1.2.3", port=5000)


def test_wrongly_typed_values_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "neutral-ipc-cfg.json"
    path.write_text(json.dumps({"port": "5000", "timeout": True, "buffer_size": 1024}))

    assert load_options(str(path)) == ConnectionOptions(buffer_size=1024)


def test_unparsable_file(tmp_path: Path) -> None:
    path = tmp_path / "neutral-ipc-cfg.json"
    path.write_text("{not json")

    assert read_config_file(str(path)) == {}
    assert load_options(str(path)) == ConnectionOptions()


def test_non_object_file(tmp_path: Path) -> None:
    path = tmp_path / "neutral-ipc-cfg.json"
    path.write_text("[1, 2, 3]")

    assert load_options(str(path)) == ConnectionOptions()


def test_overrides_win(tmp_path: Path) -> None:
    path = tmp_path / "neutral-ipc-cfg.json"
    path.write_text(json.dumps({"port": 5000, "timeout": 30}))

    options = load_options(str(path), port=6000)

    assert options.port == 6000
    assert options.timeout == 30


def test_skip_file() -> None:
    assert load_options(None, timeout=2.5) == ConnectionOptions(timeout=2.5)


def test_options_from_uri() -> None:
    options = options_from_uri("neutral://example.org:4000?timeout=2&buffer_size=16")

    assert options == ConnectionOptions(
        host="example.org", port=4000, timeout=2.0, buffer_size=16
    )


def test_options_from_uri_defaults() -> None:
    assert options_from_uri("neutral://") == ConnectionOptions()


def test_out_of_range_port_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "neutral-ipc-cfg.json"
    path.write_text(json.dumps({"port": 70000, "host": "10.0.0.9"}))

    assert load_options(str(path)) == ConnectionOptions(host="10.0.0.9")
    assert load_options(None, port=-1).port == 4273
