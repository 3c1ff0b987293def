import io
import json

from trainingkit.spellcheck import (
    Correction,
    Report,
    check_words,
    load_dictionary,
    main,
    suggest_corrections,
)

DICTIONARY_LINES = ["apple\n", "  apply  \n", "\n", "apple\n", "banana\n"]


def test_load_dictionary_counts_and_skips_blanks():
    trie, words = load_dictionary(DICTIONARY_LINES)
    assert words == ["apple", "apply", "apple", "banana"]
    assert trie.search("apple") == (True, 2)
    assert trie.search("apply") == (True, 1)
    assert trie.search("") == (False, 0)


def test_suggestions_ranked_by_frequency_then_distance():
    trie, words = load_dictionary(DICTIONARY_LINES)
    assert suggest_corrections("appl", trie, words) == ["apple", "apply"]


def test_suggestions_respect_distance_limit():
    trie, words = load_dictionary(DICTIONARY_LINES)
    assert "banana" not in suggest_corrections("appl", trie, words)
    assert suggest_corrections("zzzzzzzz", trie, words) == []


def test_check_words_builds_report():
    trie, words = load_dictionary(DICTIONARY_LINES)
    known = ["apple", "banana"]
    unknown = ["appl", "bananna"]
    lines = [known[0], "", unknown[0], " ", known[1], unknown[1]]
    report = check_words(lines, trie, words, workers=2)
    assert report.total_words == len(known) + len(unknown)
    assert report.misspelled_words == len(unknown)
    assert [c.word for c in report.corrections] == unknown
    assert report.corrections[0].suggestions == suggest_corrections("appl", trie, words)
    assert "banana" in report.corrections[1].suggestions


def test_report_to_dict_uses_json_keys():
    report = Report(total_words=4, misspelled_words=1, corrections=[Correction("appl", ["apple"])])
    assert report.to_dict() == {
        "total_words": 4,
        "misspelled_words": 1,
        "corrections": [{"word": "appl", "suggestions": ["apple"]}],
    }


def test_main_writes_report(tmp_path, monkeypatch, capsys):
    (tmp_path / "words.txt").write_text("apple\napply\nbanana\n", encoding="utf-8")
    (tmp_path / "input.txt").write_text("apple\nappl\n\nbananna\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO("app\n"))

    main([])

    out = capsys.readouterr().out
    assert "Suggestions for app are: apple, apply" in out
    assert "Report written to report.json" in out
    data = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
    assert data["total_words"] == len(["apple", "appl", "bananna"])
    assert data["misspelled_words"] == len(["appl", "bananna"])
    assert [c["word"] for c in data["corrections"]] == ["appl", "bananna"]


def test_main_reports_missing_dictionary(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    main([])
    out = capsys.readouterr().out
    assert "words.txt" in out
    assert not (tmp_path / "report.json").exists()