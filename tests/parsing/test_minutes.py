import pytest

from meroku.parsing import MinutesParseError, load_minutes, parse_minutes
from meroku.parsing.markup import meeting_details

TITLE = "教育課程部会　算数・数学ワーキンググループ（第3回）　議事録"


def page(body: str, *, title: str = TITLE, heading: str = "議事録") -> str:
    return f"""<html><head><meta charset="utf-8"><title>{title}</title></head>
<body>
<h1>{title}</h1>
<div id="contentsMain">
<p>1．日時　令和元年6月18日（火曜日）10時00分から12時00分</p>
<p>2．場所　文部科学省3F1特別会議室</p>
<h2>{heading}</h2>
{body}
</div>
</body></html>"""


def test_line_breaks_split_utterances_and_tags_open_speeches():
    markup = page("<p>【議長】おはよう<br/>ございます。<br/>【委員A】了解</p>")

    minutes = parse_minutes(markup, "no03wg074-1400001.htm")

    assert minutes.speech_count == 2
    assert minutes.speeches[0].speaker.label == "議長"
    assert minutes.speeches[0].utterances == ["おはよう", "ございます。"]
    assert minutes.speeches[1].speaker.label == "委員A"
    assert minutes.speeches[1].utterances == ["了解"]


def test_untagged_paragraphs_continue_the_open_speech():
    markup = page("<p>【議長】おはよう</p><p>ございます。</p><p>【委員A】了解</p>")

    minutes = parse_minutes(markup, "no03wg074-1400001.htm")

    assert [speech.utterances for speech in minutes.speeches] == [["おはよう", "ございます。"], ["了解"]]


def test_repeated_labels_share_one_speaker():
    markup = page("<p>【主査】開会します。</p><p>【委員】質問です。</p><p>【主査】どうぞ。</p>")

    minutes = parse_minutes(markup, "minutes.htm")

    assert list(minutes.speakers) == ["主査", "委員"]
    assert minutes.speeches[0].speaker is minutes.speeches[2].speaker
    assert len(minutes.speeches) == minutes.speech_count == 3
    for speech in minutes.speeches:
        assert any(speech.speaker is speaker for speaker in minutes.speakers.values())


def test_preamble_without_speaker_is_kept_when_not_empty():
    markup = page("<p>（配付資料の確認）</p><p>【主査】開会します。</p>")

    minutes = parse_minutes(markup, "minutes.htm")

    assert minutes.speeches[0].speaker is None
    assert minutes.speeches[0].utterances == ["（配付資料の確認）"]
    assert minutes.speeches[1].speaker.label == "主査"


def test_trailing_speech_is_flushed_even_when_empty():
    minutes = parse_minutes(page("<p>【主査】開会します。</p><p>【委員】</p>"), "minutes.htm")

    assert minutes.speech_count == 2
    assert minutes.speeches[-1].speaker.label == "委員"
    assert minutes.speeches[-1].utterances == []


def test_transcript_without_paragraphs_yields_one_empty_speech():
    minutes = parse_minutes(page(""), "minutes.htm")

    assert minutes.speech_count == 1
    assert minutes.speeches[0].speaker is None
    assert minutes.speeches[0].utterances == []
    assert minutes.speakers == {}


def test_metadata_from_title_file_name_and_page():
    minutes = parse_minutes(page("<p>【主査】開会します。</p>"), "no03wg074-1400001.htm")

    assert minutes.title == TITLE
    assert minutes.working_group == "教育課程部会"
    assert minutes.working_group_order == "03"
    assert minutes.working_group_id == "074"
    assert minutes.date == "令和元年6月18日（火曜日）10時00分から12時00分"
    assert minutes.venue == "文部科学省3F1特別会議室"
    assert minutes.source == "no03wg074-1400001.htm"


def test_file_name_without_working_group_pattern_leaves_fields_empty():
    minutes = parse_minutes(page("<p>【主査】開会します。</p>"), "1400001.htm")

    assert minutes.working_group_order == ""
    assert minutes.working_group_id == ""


def test_paragraphs_before_the_heading_are_not_speeches():
    markup = page("<p>【主査】開会します。</p>")

    minutes = parse_minutes(markup, "minutes.htm")

    assert all("日時" not in utterance for speech in minutes.speeches for utterance in speech.utterances)


def test_missing_content_region_names_the_source():
    with pytest.raises(MinutesParseError) as excinfo:
        parse_minutes("<html><body><h1>x</h1><p>【主査】a</p></body></html>", "no01wg001-broken.htm")

    assert "no01wg001-broken.htm" in str(excinfo.value)


def test_missing_transcript_heading_is_an_error():
    with pytest.raises(MinutesParseError):
        parse_minutes(page("<p>【主査】a</p>", heading="配付資料"), "minutes.htm")


def test_load_minutes_reads_shift_jis_files(tmp_path):
    markup = page("<p>【主査】開会します。</p>").replace('charset="utf-8"', 'charset="Shift_JIS"')
    path = tmp_path / "no05wg080-1.htm"
    path.write_bytes(markup.encode("shift_jis"))

    minutes = load_minutes(path)

    assert minutes.speeches[0].utterances == ["開会します。"]
    assert minutes.working_group_id == "080"


def test_load_minutes_missing_file(tmp_path):
    with pytest.raises(MinutesParseError):
        load_minutes(tmp_path / "missing.htm")


def test_speech_text_is_not_read_as_meeting_details():
    markup = page("<p>【主査】開会します。<br/>日時は追ってご連絡します。</p><p>場所：未定です。</p>")
    markup = markup.replace("<p>1．日時　令和元年6月18日（火曜日）10時00分から12時00分</p>", "")
    markup = markup.replace("<p>2．場所　文部科学省3F1特別会議室</p>", "")

    minutes = parse_minutes(markup, "minutes.htm")

    assert minutes.date == ""
    assert minutes.venue == ""
    assert minutes.speeches[0].utterances == ["開会します。", "日時は追ってご連絡します。", "場所：未定です。"]


def test_meeting_details_need_a_separator_after_the_label():
    assert meeting_details(["日時は追って", "場所を変えて"]) == ("", "")
    assert meeting_details(["日時：令和元年6月18日", "場所:文部科学省"]) == ("令和元年6月18日", "文部科学省")
    assert meeting_details(["日時", "令和元年6月18日", "3．場所", "文部科学省"]) == ("令和元年6月18日", "文部科学省")
