import json
from pathlib import Path

import yaml

from p3dkit.cli import main

from p3d_builder import (
    chunk,
    p3d_file,
    set_chunk,
    shader_chunk,
    texture_chunk,
)


def _write(path: Path, data: bytes) -> Path:
    path.write_bytes(data)
    return path


def test_tree_json(tmp_path: Path, capsys):
    f = _write(
        tmp_path / "a.p3d",
        p3d_file(texture_chunk("brick"), chunk(0xABCD0000, b"??")),
    )
    assert main(["-r", "silent", "tree", str(f), "--json"]) == 0
    info = json.loads(capsys.readouterr().out)
    assert info["file"] == "a.p3d"
    assert info["decoded"] == {"texture": 1, "raw": 1}
    names = [c["name"] for c in info["tree"]["children"]]
    assert names == ["TEXTURE", "0xABCD0000"]


def test_tree_text_respects_depth(tmp_path: Path, capsys):
    f = _write(tmp_path / "a.p3d", p3d_file(texture_chunk("brick")))
    assert main(["-r", "silent", "tree", str(f), "--depth", "1"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("ROOT @0")
    assert out[1].strip().startswith("TEXTURE")
    assert "1 children" in out[2]
    assert not any("IMAGE_DATA" in line for line in out)


def test_tree_on_corrupt_file_fails(tmp_path: Path, capsys):
    f = _write(tmp_path / "bad.p3d", p3d_file(chunk(1)) + b"\x00")
    assert main(["tree", str(f)]) == 1
    assert "Trailing bytes" in capsys.readouterr().err


def test_load_files_and_list(tmp_path: Path, capsys):
    a = _write(tmp_path / "a.p3d", p3d_file(shader_chunk("wall", "brick")))
    b = _write(tmp_path / "b.p3d", p3d_file(texture_chunk("brick")))
    assert main(["load", str(a), str(b), "--list"]) == 0
    captured = capsys.readouterr()
    assert "texture\tbrick" in captured.out
    assert "shader\twall" in captured.out
    assert "texture=1" in captured.err


def test_load_json_summary_with_failed_file(tmp_path: Path, capsys):
    good = _write(tmp_path / "good.p3d", p3d_file(texture_chunk("t")))
    bad = _write(tmp_path / "bad.p3d", b"not a p3d file at all")
    code = main(["-r", "silent", "load", str(good), str(bad), "--json"])
    assert code == 1
    out = json.loads(capsys.readouterr().out)
    statuses = {f["file"]: f["status"] for f in out["files"]}
    assert statuses == {"good.p3d": "loaded", "bad.p3d": "failed"}
    assert out["resources"]["counts"]["texture"] == 1


def test_load_partial_file_is_not_a_failure(tmp_path: Path, capsys):
    f = _write(
        tmp_path / "p.p3d",
        p3d_file(texture_chunk("ok"), chunk(0x10000, b"\x00")),
    )
    assert main(["-r", "silent", "load", str(f), "--json"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["files"][0]["status"] == "partial"
    assert out["files"][0]["failures"] == 1


def test_load_from_config_with_seed(tmp_path: Path, capsys, monkeypatch):
    _write(
        tmp_path / "sets.p3d",
        p3d_file(
            set_chunk(
                "grass",
                [texture_chunk(n, width=w) for w, n in enumerate("abcd", 1)],
            )
        ),
    )
    cfg = tmp_path / "load.yaml"
    cfg.write_text(yaml.safe_dump({"files": ["sets.p3d"]}))
    monkeypatch.setenv("P3DKIT_SEED", "3")

    picks = set()
    for _ in range(3):
        argv = ["-r", "silent", "load", "--config", str(cfg), "--json"]
        assert main(argv) == 0
        out = json.loads(capsys.readouterr().out)
        (tex,) = out["resources"]["textures"]
        picks.add(tex["width"])
    assert out["files"][0]["status"] == "loaded"
    assert len(picks) == 1


def test_load_without_files(capsys):
    assert main(["load"]) == 2
    assert "No input files" in capsys.readouterr().err


def test_json_reporter_emits_events(tmp_path: Path, capsys):
    f = _write(tmp_path / "a.p3d", p3d_file(texture_chunk("t")))
    assert main(["-r", "json", "load", str(f)]) == 0
    events = [json.loads(line) for line in capsys.readouterr().err.splitlines()]
    kinds = [e["event"] for e in events]
    assert "batch_start" in kinds
    assert "file" in kinds
    assert "batch_end" in kinds


def test_missing_config_is_usage_error(tmp_path: Path, capsys):
    assert main(["load", "--config", str(tmp_path / "none.yaml")]) == 2


def test_unreadable_file_is_reported_and_batch_continues(
    tmp_path: Path, capsys, monkeypatch
):
    good = _write(tmp_path / "good.p3d", p3d_file(texture_chunk("t")))
    locked = _write(tmp_path / "locked.p3d", p3d_file(texture_chunk("u")))
    real_read = Path.read_bytes

    def read_bytes(self):
        if self.name == "locked.p3d":
            raise PermissionError(13, "Permission denied", str(self))
        return real_read(self)

    monkeypatch.setattr(Path, "read_bytes", read_bytes)
    code = main(["-r", "silent", "load", str(locked), str(good), "--json"])
    assert code == 1
    out = json.loads(capsys.readouterr().out)
    statuses = {f["file"]: f["status"] for f in out["files"]}
    assert statuses == {"locked.p3d": "failed", "good.p3d": "loaded"}
    assert "Permission denied" in out["files"][0]["error"]
