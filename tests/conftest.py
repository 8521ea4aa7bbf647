from __future__ import annotations

from pathlib import Path

import pytest

from meroku.core import WorkingGroup
from meroku.export import WORKING_GROUPS_FILE, write_working_groups

DIRECT_MINUTES = """<html><head><meta charset="utf-8"></head><body>
<h1>教育課程部会　算数・数学ワーキンググループ（第1回）　議事録</h1>
<div id="contentsMain">
<p>1．日時　令和元年6月18日</p>
<p>2．場所　文部科学省</p>
<h2>議事録</h2>
<p>【山田主査】開会します。</p>
<p>【佐藤委員】質問です。<br/>よろしいですか。</p>
<p>【山田主査】どうぞ。</p>
</div>
</body></html>"""

SCANNED_MINUTES = """<html><head><meta charset="utf-8"></head><body>
<div><p>中央教育審議会</p><p>教育課程部会　算数・数学ワーキンググループ（第2回）</p><p>議事録</p></div>
<p>出席者一覧</p>
<p>【山田主査】本日は<br/>晴天なり。</p>
</body></html>"""

ROSTER = """<html><head><meta charset="utf-8"></head><body>
<div id="contentsMain"><table>
<tr><th>主査</th><td>山田　花子</td><td>X大学教授</td></tr>
<tr><th></th><td>鈴木一郎</td><td>Y大学准教授</td></tr>
</table></div>
</body></html>"""


@pytest.fixture()
def download_tree(tmp_path) -> Path:
    """A directory laid out like the output of ``meroku download --memberlist``."""

    root = tmp_path / "download"
    html_dir = root / "html"
    (html_dir / "memberlist").mkdir(parents=True)
    (root / "html_from_pdf").mkdir()

    (html_dir / "no03wg074-0001.htm").write_text(DIRECT_MINUTES, encoding="utf8")
    (html_dir / "broken.htm").write_text("<html><body><p>工事中</p></body></html>", encoding="utf8")
    (root / "html_from_pdf" / "no03wg074-0002.htm").write_text(SCANNED_MINUTES, encoding="utf8")
    (html_dir / "memberlist" / "no03wg074-meibo.htm").write_text(ROSTER, encoding="utf8")
    write_working_groups(
        {"no03": WorkingGroup(order="no03", id="074", name="算数・数学ワーキンググループ")},
        root / WORKING_GROUPS_FILE,
    )
    return root
