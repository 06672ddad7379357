from PIL import Image as PILImage

from albumgen.thumbnails import generate_thumbnails, make_thumbnail


def test_generate_thumbnails_resizes_to_width(tmp_path):
    src = tmp_path / "images"
    dest = tmp_path / "thumbnails"
    src.mkdir()
    PILImage.new("RGB", (800, 600), (10, 20, 30)).save(src / "wide.jpg")
    PILImage.new("RGBA", (200, 400), (10, 20, 30, 128)).save(src / "tall.png")
    (src / "readme.txt").write_text("skip me")

    written, failed = generate_thumbnails(str(src), str(dest), width=100)

    assert sorted(written) == ["tall.png", "wide.jpg"]
    assert failed == []
    with PILImage.open(dest / "wide.jpg") as img:
        assert img.size == (100, 75)
    with PILImage.open(dest / "tall.png") as img:
        assert img.size == (100, 200)


def test_thumbnail_respects_exif_orientation(tmp_path):
    src = tmp_path / "rotated.jpg"
    exif = PILImage.Exif()
    exif[274] = 6
    PILImage.new("RGB", (200, 100)).save(src, exif=exif)

    assert make_thumbnail(str(src), str(tmp_path / "out.jpg"), width=50) == (50, 100)


def test_broken_file_is_reported_and_skipped(tmp_path, capsys):
    src = tmp_path / "images"
    src.mkdir()
    (src / "broken.jpg").write_bytes(b"not an image")
    PILImage.new("RGB", (40, 40)).save(src / "ok.jpg")

    written, failed = generate_thumbnails(str(src), str(tmp_path / "thumbs"), width=20)

    assert written == ["ok.jpg"]
    assert failed == ["broken.jpg"]
    assert "broken.jpg" in capsys.readouterr().out
