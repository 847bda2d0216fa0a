"""Tests for the command line interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import FakeClassifier, make_detector
from langrefine import predict
from langrefine.language_detector import RefinedLanguageDetector


@pytest.fixture
def fake_detector(tmp_path: Path, monkeypatch, norwegian_langs, norwegian_checkers):
    dict_dir = tmp_path / "dicts"
    dict_dir.mkdir()
    detector = make_detector(dict_dir, "__label__no", norwegian_checkers, norwegian_langs, "nb")
    seen = []

    def from_config(config, classifier=None, loader=None):
        seen.append(config)
        return detector

    monkeypatch.setattr(RefinedLanguageDetector, "from_config", staticmethod(from_config))
    return seen


def test_prints_language_of_sentence(fake_detector, capsys) -> None:
    assert predict.main(["Dette er en fin dag", "--lang", "nb"]) == 0
    assert capsys.readouterr().out == "nb\n"
    assert fake_detector[0].lang == "nb"


def test_verbose_prints_trace(fake_detector, capsys) -> None:
    assert predict.main(["Dette er en fin dag", "--lang", "nb", "--verbose"]) == 0
    out = capsys.readouterr().out
    assert "Classifier: no -> nb" in out
    assert "Candidates: nn, da, nb" in out
    assert "da       rejected" in out
    assert out.rstrip().endswith("Language: nb")


def test_batch_mode_writes_json(fake_detector, tmp_path: Path) -> None:
    input_file = tmp_path / "sentences.txt"
    input_file.write_text("Dette er en fin dag\n\nikkje\n", encoding="utf-8")
    output_file = tmp_path / "out.json"

    code = predict.main(
        ["--lang", "nb", "--input_file", str(input_file), "--output_file", str(output_file)]
    )

    assert code == 0
    results = json.loads(output_file.read_text(encoding="utf-8"))
    assert [r["input_text"] for r in results] == ["Dette er en fin dag", "ikkje"]
    assert results[0]["language"] == "nb"
    assert results[1]["id"] == 1


def test_read_sentences_from_json_objects(tmp_path: Path) -> None:
    path = tmp_path / "input.json"
    path.write_text(json.dumps([{"text": "hei"}, "hallo"]), encoding="utf-8")
    assert predict.read_sentences(str(path)) == ["hei", "hallo"]


def test_missing_dictionaries_exit_non_zero(tmp_path: Path, capsys) -> None:
    code = predict.main(["Dette er fint", "--lang", "nb", "--dict_path", str(tmp_path)])
    assert code == 1
    assert "nn" in capsys.readouterr().err


def test_invalid_mode_in_config_exits_non_zero(tmp_path: Path, capsys) -> None:
    config = tmp_path / "config.json"
    config.write_text('{"lang": "nb", "mode": "fast"}', encoding="utf-8")
    assert predict.main(["hei", "--config", str(config)]) == 1
    assert "Unknown mode" in capsys.readouterr().err


def test_invalid_mode_flag_is_a_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        predict.main(["hei", "--lang", "nb", "--mode", "fast"])
    assert excinfo.value.code == 2


def test_sentence_or_input_file_required() -> None:
    with pytest.raises(SystemExit) as excinfo:
        predict.main(["--lang", "nb"])
    assert excinfo.value.code == 2


class LetterlessFailingClassifier(FakeClassifier):
    """Fails on text without letters, like langdetect's 'No features in text.'."""

    def predict(self, text: str) -> str:
        if not any(ch.isalpha() for ch in text):
            raise RuntimeError("No features in text.")
        return super().predict(text)


def test_batch_mode_records_failed_sentence_and_continues(
    tmp_path: Path, norwegian_langs, norwegian_checkers
) -> None:
    dict_dir = tmp_path / "dicts"
    dict_dir.mkdir()
    detector = make_detector(
        dict_dir, "nb", norwegian_checkers, norwegian_langs, "nb",
        classifier=LetterlessFailingClassifier("nb"),
    )
    input_file = tmp_path / "sentences.txt"
    input_file.write_text("dette er fint\n12345\nikke\n", encoding="utf-8")
    output_file = tmp_path / "out.json"

    results = predict.batch_mode(detector, str(input_file), str(output_file))

    assert [r["id"] for r in results] == [0, 1, 2]
    assert results[1] == {"id": 1, "input_text": "12345", "error": "No features in text."}
    assert results[0]["language"] == "nb"
    assert results[2]["language"] == "nb"
    assert json.loads(output_file.read_text(encoding="utf-8")) == results


def test_read_sentences_accepts_non_string_json_items(tmp_path: Path) -> None:
    path = tmp_path / "input.json"
    path.write_text(json.dumps([42, {"text": "hei"}, "hallo", None]), encoding="utf-8")
    assert predict.read_sentences(str(path)) == ["42", "hei", "hallo", "None"]
