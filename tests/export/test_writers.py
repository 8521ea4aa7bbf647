import csv
import json
from datetime import datetime

import pytest

from meroku.core import DownloadReport, MemberList, Minutes, Person, Speaker, Speech, WorkingGroup
from meroku.export import (
    ExportError,
    SPEAKER_CSV_COLUMNS,
    khcoder_lines,
    load_minutes_json,
    load_working_groups,
    minutes_to_dict,
    save_download_report,
    write_all_minutes_json,
    write_khcoder,
    write_member_list_json,
    write_speakers_csv,
    write_working_groups,
)


def sample_minutes(order: str = "03", title: str = "数学ワーキンググループ（第1回）") -> Minutes:
    yamada = Person(id="p-1", label="山田花子主査", name="山田花子", role="主査", affiliation="X大学")
    chair = Speaker(label="山田主査", resolution_score=0.9, person=yamada)
    member = Speaker(label="佐藤委員")
    return Minutes(
        source=f"no{order}wg074-1.htm",
        title=title,
        working_group_order=order,
        working_group_id="074",
        speakers={"山田主査": chair, "佐藤委員": member},
        speeches=[
            Speech(utterances=["（開会）"]),
            Speech(speaker=chair, utterances=["開会します。", "資料を確認します。"]),
            Speech(speaker=member, utterances=["質問です。"]),
            Speech(speaker=chair, utterances=["どうぞ。"]),
        ],
    )


def test_minutes_dict_refers_to_speakers_by_label():
    data = minutes_to_dict(sample_minutes())

    assert data["speech_count"] == 4
    assert data["speeches"][0]["speaker"] is None
    assert data["speeches"][1]["speaker"] == "山田主査"
    assert data["speakers"]["山田主査"]["person"]["id"] == "p-1"
    assert data["speakers"]["佐藤委員"]["person"] is None


def test_json_round_trip_preserves_shared_speakers(tmp_path):
    path = write_all_minutes_json([sample_minutes()], tmp_path)

    (loaded,) = load_minutes_json(path)

    assert loaded.speech_count == 4
    assert loaded.speeches[1].speaker is loaded.speeches[3].speaker
    assert loaded.speeches[1].speaker is loaded.speakers["山田主査"]
    assert loaded.speakers["山田主査"].person.name == "山田花子"
    assert loaded.speakers["山田主査"].resolution_score == pytest.approx(0.9)
    assert "山田主査" in path.read_text(encoding="utf8")


def test_unknown_speaker_reference_is_rejected(tmp_path):
    data = minutes_to_dict(sample_minutes())
    data["speeches"][1]["speaker"] = "不明"
    path = tmp_path / "broken.json"
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf8")

    with pytest.raises(ValueError):
        load_minutes_json(path)


def test_speaker_csv_has_one_row_per_speaker(tmp_path):
    path = write_speakers_csv([sample_minutes()], tmp_path)

    with path.open("r", encoding="cp932", newline="") as fh:
        rows = list(csv.reader(fh))

    assert tuple(rows[0]) == SPEAKER_CSV_COLUMNS
    assert rows[1] == ["03", "074", "数学ワーキンググループ（第1回）", "山田主査", "0.9", "p-1", "山田花子主査", "山田花子", "主査", "X大学"]
    assert rows[2][3:] == ["佐藤委員", "0", "", "", "", "", ""]
    assert len(rows) == 3


def test_speaker_csv_keeps_windows_31j_characters(tmp_path):
    takahashi = Person(id="p-2", label="髙橋一郎委員", name="髙橋一郎", role="委員", affiliation="①大学～研究所")
    minutes = Minutes(
        source="no03wg074-1.htm",
        title="第1回～",
        speakers={"髙橋委員": Speaker(label="髙橋委員", resolution_score=0.9, person=takahashi)},
    )

    path = write_speakers_csv([minutes], tmp_path)

    with path.open("r", encoding="cp932", newline="") as fh:
        rows = list(csv.reader(fh))
    assert rows[1] == ["", "", "第1回～", "髙橋委員", "0.9", "p-2", "髙橋一郎委員", "髙橋一郎", "委員", "①大学～研究所"]


def test_speaker_csv_replaces_unencodable_characters(tmp_path):
    minutes = sample_minutes(title="山﨑😀")

    path = write_speakers_csv([minutes], tmp_path)

    assert "山﨑?" in path.read_text(encoding="cp932")


def test_khcoder_headings():
    groups = {"no03": WorkingGroup(order="no03", id="074", name="数学ワーキンググループ")}
    first = sample_minutes()
    second = sample_minutes(title="数学ワーキンググループ（第2回）")

    lines = khcoder_lines([first, second], groups)

    assert lines.count("<h1>数学ワーキンググループ</h1>") == 1
    assert lines[:5] == [
        "<h1>数学ワーキンググループ</h1>",
        "<h2>数学ワーキンググループ（第1回）</h2>",
        "<h3></h3>",
        "（開会）",
        "<h3>山田主査</h3>",
    ]
    assert "<h2>数学ワーキンググループ（第2回）</h2>" in lines


def test_khcoder_unknown_working_group_raises(tmp_path):
    with pytest.raises(ExportError):
        write_khcoder([sample_minutes(order="09")], {}, tmp_path)


def test_working_groups_round_trip(tmp_path):
    groups = {
        "no03": WorkingGroup(
            order="no03",
            id="074",
            name="数学ワーキンググループ",
            minutes_urls=["https://example.invalid/1.htm"],
        )
    }

    path = write_working_groups(groups, tmp_path / "working-groups.json")

    assert load_working_groups(path) == groups


def test_member_list_json(tmp_path):
    person = Person(id="p-1", label="山田花子主査", name="山田花子", role="主査", affiliation="X大学")
    member_list = MemberList(members=[person], working_group=WorkingGroup(order="no03", id="074"))

    path = write_member_list_json(member_list, tmp_path / "memberlist" / "roster.json")

    data = json.loads(path.read_text(encoding="utf8"))
    assert data["working_group"]["id"] == "074"
    assert data["members"] == [
        {"id": "p-1", "label": "山田花子主査", "name": "山田花子", "role": "主査", "affiliation": "X大学"}
    ]


def test_download_report_file_name(tmp_path):
    report = DownloadReport(downloaded=["a"], failed=["b"])

    path = save_download_report(report, tmp_path, now=datetime(2019, 6, 18, 10, 0, 0, 123))

    assert path.name == "report_2019-06-18T100000.000123.json"
    assert json.loads(path.read_text(encoding="utf8")) == {"downloaded": ["a"], "failed": ["b"]}
