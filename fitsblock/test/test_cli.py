import json

from PIL import Image

import render_fits
from fitsblock.export import document_to_dict, save_json
from fitsblock.fs_scan import find_fits_files
from fitsblock.scanner import scan


def sample_file(fb, path, values=(0.0, 1.0, 2.0, 0.5, 0.25, 1.5, 0.0, 2.0)):
    path.write_bytes(fb.image_header(4, 2, extra=[("OBJECT", "'M 51'")]) + fb.float_data(values) + fb.extension_header())
    return path


def test_render_single_file(fb, tmp_path):
    src = sample_file(fb, tmp_path / "m51.fits")
    out = tmp_path / "render"
    assert render_fits.main([str(src), "--out-dir", str(out), "--json"]) == 0

    with Image.open(out / "m51.png") as im:
        assert im.size == (4, 2)
        assert im.getpixel((2, 0)) == 255

    data = json.loads((out / "m51.json").read_text(encoding="utf-8"))
    assert data["summary"]["object"] == "M 51"
    assert data["header"]["NAXIS1"] == "4"
    assert data["data"] == {"offset": 2880, "length": 32, "width": 4, "height": 2}
    assert len(data["extensions"]) == 1


def test_fatal_error_exit_code(fb, tmp_path, capsys):
    src = tmp_path / "short.fits"
    src.write_bytes(b"SIMPLE  =                    T")
    assert render_fits.main([str(src), "--out-dir", str(tmp_path / "render")]) == 1
    assert "[ERROR]" in capsys.readouterr().err


def test_malformed_header_names_key(fb, tmp_path, capsys):
    src = tmp_path / "bad.fits"
    src.write_bytes(fb.header_block([("NAXIS", "2"), ("NAXIS1", "abc"), ("NAXIS2", "2")]) + fb.float_data(range(8)))
    assert render_fits.main([str(src), "--out-dir", str(tmp_path / "render")]) == 1
    assert "NAXIS1" in capsys.readouterr().err


def test_missing_file_exit_code(tmp_path):
    assert render_fits.main([str(tmp_path / "nope.fits"), "--out-dir", str(tmp_path / "render")]) == 1


def test_directory_batch(fb, tmp_path):
    root = tmp_path / "obs"
    (root / "night2").mkdir(parents=True)
    (root / ".git").mkdir()
    sample_file(fb, root / "a.fits")
    sample_file(fb, root / "night2" / "b.FIT")
    sample_file(fb, root / ".git" / "ignored.fits")
    (root / "notes.txt").write_text("x")

    assert find_fits_files(root) == [root / "a.fits", root / "night2" / "b.FIT"]

    out = tmp_path / "render"
    assert render_fits.main([str(root), "--out-dir", str(out)]) == 0
    assert (out / "a.png").exists()
    assert (out / "night2" / "b.png").exists()


def test_json_roundtrip(fb, tmp_path):
    doc = scan(fb.image_header(4, 2) + fb.float_data(range(8)))
    path = tmp_path / "doc.json"
    assert save_json(path, document_to_dict(doc))
    loaded = json.loads(path.read_text(encoding="utf-8"))
    assert loaded["size"] == 2 * fb.BLOCK
    assert loaded["extensions"] == []


def test_batch_keeps_sub_paths_apart(fb, tmp_path):
    root = tmp_path / "obs"
    (root / "night2").mkdir(parents=True)
    sample_file(fb, root / "m51.fits", values=[2.0] * 8)
    sample_file(fb, root / "night2" / "m51.fits", values=[0.0, 2.0] * 4)

    out = tmp_path / "render"
    assert render_fits.main([str(root), "--out-dir", str(out), "--json"]) == 0
    with Image.open(out / "m51.png") as im:
        assert im.getpixel((0, 0)) == 255
    with Image.open(out / "night2" / "m51.png") as im:
        assert im.getpixel((0, 0)) == 0
    assert (out / "night2" / "m51.json").exists()
