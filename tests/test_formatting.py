import pytest

from jenkins_cli.formatting import (
    build_fields,
    build_status,
    format_duration,
    format_field,
    job_fields,
    job_url_path,
    parse_job_path,
    status_from_color,
)


@pytest.mark.parametrize("color, expected", [
    ("", ""),
    (None, ""),
    ("blue", "SUCCESS"),
    ("blue_anime", "SUCCESS"),
    ("red", "FAILURE"),
    ("red_anime", "FAILURE"),
    ("yellow", "UNSTABLE"),
    ("yellow_anime", "UNSTABLE"),
    ("grey", "PENDING"),
    ("grey_anime", "PENDING"),
    ("aborted", "ABORTED"),
    ("aborted_anime", "ABORTED"),
    ("notbuilt", "NOT_BUILT"),
    ("disabled", "DISABLED"),
    ("disabled_anime", "DISABLED"),
    ("mystery", "MYSTERY"),
])
def test_status_from_color(color, expected):
    assert status_from_color(color) == expected


@pytest.mark.parametrize("milliseconds, expected", [
    (0, "0 seconds"),
    (1000, "1 second"),
    (5000, "5 seconds"),
    (59000, "59 seconds"),
    (59999, "59 seconds"),
    (60000, "1 minute"),
    (120000, "2 minutes"),
    (3599000, "59 minutes"),
    (3600000, "1 hour"),
    (43200000, "12 hours"),
    (86399000, "23 hours"),
    (86400000, "1 day"),
    (604800000, "7 days"),
    (2592000000, "30 days"),
])
def test_format_duration(milliseconds, expected):
    assert format_duration(milliseconds) == expected


@pytest.mark.parametrize("path, expected", [
    ("simple-job", ("simple-job", [])),
    ("folder1/job/my-job", ("my-job", ["folder1"])),
    ("a/job/b/job/c", ("c", ["a", "b"])),
    (
        "cloud-workspaces/job/cws-api/job/cws-api-a/job/master",
        ("master", ["cloud-workspaces", "cws-api", "cws-api-a"]),
    ),
])
def test_parse_job_path(path, expected):
    assert parse_job_path(path) == expected


def test_job_url_path_encodes_each_segment():
    assert job_url_path("my job") == "/job/my%20job"
    assert job_url_path("team/job/feature/x") == "/job/team/job/feature%2Fx"


def test_build_status_prefers_building():
    assert build_status({"building": True, "result": None}) == "BUILDING"
    assert build_status({"building": False, "result": "FAILURE"}) == "FAILURE"
    assert build_status({"building": False, "result": None}) == ""


def test_build_fields_skips_empty_optional_fields():
    fields = dict(build_fields({"number": 7, "url": "https://ci/job/x/7/", "result": "SUCCESS",
                                "timestamp": 0, "duration": 0, "description": None}))
    assert fields == {"Build Number": 7, "URL": "https://ci/job/x/7/", "Status": "SUCCESS"}


def test_build_fields_formats_duration():
    fields = dict(build_fields({"number": 7, "url": "u", "result": "SUCCESS",
                                "timestamp": 1700000000000, "duration": 125000}))
    assert fields["Duration"] == "2 minutes"
    assert "Started" in fields


def test_job_fields():
    job = {
        "name": "api",
        "url": "https://ci/job/api/",
        "color": "red",
        "description": "",
        "lastBuild": {"number": 12, "result": "FAILURE"},
        "lastSuccessfulBuild": {"number": 10},
        "lastFailedBuild": None,
    }
    assert job_fields(job) == [
        ("Job Name", "api"),
        ("URL", "https://ci/job/api/"),
        ("Status", "FAILURE"),
        ("Last Build", "#12 - FAILURE"),
        ("Last Success", "#10"),
    ]


def test_job_fields_omits_empty_status():
    fields = dict(job_fields({"name": "folder", "url": "u", "color": None}))
    assert "Status" not in fields


def test_format_field():
    assert format_field("URL", "https://ci") == "URL:                 https://ci"
    assert format_field("Description", "one\ntwo") == (
        "Description:        \n"
        "                     one\n"
        "                     two"
    )
