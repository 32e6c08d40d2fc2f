"""
Command-line train and test subcommands.
"""

import json

import pytest

from semantic_match.cli import main


CAT = "The cat sleeps on the mat."
DOG = "Dogs are loyal animals."


def test_train_then_test(service, capsys):
    assert main(["train", CAT, DOG], service=service) == 0
    trained = json.loads(capsys.readouterr().out)
    assert trained["success"] is True
    assert trained["count"] == 2

    assert main(["test", CAT], service=service) == 0
    result = json.loads(capsys.readouterr().out)
    assert result["bestMatch"] == CAT
    assert result["bestScore"] == pytest.approx(1.0)
    assert result["status"] == "matched"


def test_train_from_file(service, tmp_path, capsys):
    corpus_file = tmp_path / "corpus.json"
    corpus_file.write_text(json.dumps([CAT, DOG]), encoding="utf-8")

    assert main(["train", "--file", str(corpus_file)], service=service) == 0
    assert json.loads(capsys.readouterr().out)["count"] == 2
    assert service.index.current.sentences == (CAT, DOG)


def test_train_bad_file(service, tmp_path, capsys):
    corpus_file = tmp_path / "corpus.json"
    corpus_file.write_text('{"not": "a list"}', encoding="utf-8")

    assert main(["train", "--file", str(corpus_file)], service=service) == 1
    assert "JSON array of strings" in capsys.readouterr().err


def test_train_nothing_fails(service, capsys):
    assert main(["train"], service=service) == 1
    assert json.loads(capsys.readouterr().out)["success"] is False


def test_test_without_data(service, capsys):
    assert main(["test", CAT], service=service) == 0
    assert json.loads(capsys.readouterr().out) == {"bestMatch": None, "bestScore": None, "status": "no_data"}


def test_command_required():
    with pytest.raises(SystemExit):
        main([])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
