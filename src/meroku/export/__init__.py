"""Writers for the files produced by the download and parse commands."""
from __future__ import annotations

from .writers import (
    SPEAKER_CSV_COLUMNS,
    WORKING_GROUPS_FILE,
    ExportError,
    khcoder_lines,
    load_minutes_json,
    load_working_groups,
    minutes_from_dict,
    minutes_to_dict,
    save_download_report,
    write_all_minutes_json,
    write_khcoder,
    write_member_list_json,
    write_minutes_json,
    write_speakers_csv,
    write_working_groups,
)

__all__ = [
    "SPEAKER_CSV_COLUMNS",
    "WORKING_GROUPS_FILE",
    "ExportError",
    "khcoder_lines",
    "load_minutes_json",
    "load_working_groups",
    "minutes_from_dict",
    "minutes_to_dict",
    "save_download_report",
    "write_all_minutes_json",
    "write_khcoder",
    "write_member_list_json",
    "write_minutes_json",
    "write_speakers_csv",
    "write_working_groups",
]
