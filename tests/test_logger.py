from multifacerec.recognize.logger import RecognitionLogger


def test_scene_changes_are_logged(tmp_path):
    log = tmp_path / "data" / "recognition_log.txt"
    logger = RecognitionLogger(str(log), echo=False)

    assert logger.update_scene(["alice", ""]) == ["alice: entered scene"]
    assert logger.update_scene(["alice", "alice"]) == []
    assert logger.update_scene(["bob"]) == ["bob: entered scene", "alice: left scene"]

    lines = log.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 3
    assert lines[0].endswith("alice: entered scene")
    assert lines[2].endswith("alice: left scene")


def test_unrecognized_faces_are_ignored(tmp_path):
    logger = RecognitionLogger(str(tmp_path / "log.txt"), echo=False)
    assert logger.update_scene(["", ""]) == []
    assert not (tmp_path / "log.txt").exists()


def test_clear_forgets_present_names(tmp_path):
    logger = RecognitionLogger(str(tmp_path / "log.txt"), echo=False)
    logger.update_scene(["alice"])
    logger.clear()
    assert logger.update_scene(["alice"]) == ["alice: entered scene"]
