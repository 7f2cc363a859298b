from unittest.mock import patch

import pytest
import requests

from jenkins_cli.client import JenkinsClient
from jenkins_cli.errors import JenkinsAPIError, JenkinsRequestError, ResponseDecodeError
from jenkins_cli.session import Session

from helpers import make_response

SESSION = Session(url="https://ci.example.com/jenkins", username="alice", token="tok")


@pytest.fixture
def client():
    with JenkinsClient(SESSION) as c:
        yield c


def test_client_uses_basic_auth(client):
    assert client._http.auth.username == "alice"
    assert client._http.auth.password == "tok"


def test_list_jobs(client):
    jobs = [{"name": "api", "url": "https://ci.example.com/jenkins/job/api/", "color": "blue"}]
    with patch.object(requests.Session, "request", return_value=make_response(json_body={"jobs": jobs})) as request:
        assert client.list_jobs() == jobs

    request.assert_called_once_with(
        "GET",
        "https://ci.example.com/jenkins/api/json",
        params={"tree": "jobs[name,url,color]"},
        timeout=30,
    )


def test_list_jobs_empty(client):
    with patch.object(requests.Session, "request", return_value=make_response(json_body={})):
        assert client.list_jobs() == []


def test_get_job_nested_path(client):
    with patch.object(requests.Session, "request", return_value=make_response(json_body={"name": "master"})) as request:
        assert client.get_job("team/job/api/job/master") == {"name": "master"}

    method, url = request.call_args.args
    assert method == "GET"
    assert url == "https://ci.example.com/jenkins/job/team/job/api/job/master/api/json"
    assert "lastBuild[number,result]" in request.call_args.kwargs["params"]["tree"]


@pytest.mark.parametrize("status", [200, 201])
def test_build_job_accepts_200_and_201(client, status):
    with patch.object(requests.Session, "request", return_value=make_response(status_code=status)) as request:
        client.build_job("my job")

    assert request.call_args.args == ("POST", "https://ci.example.com/jenkins/job/my%20job/build")


def test_get_build(client):
    build = {"number": 42, "result": "SUCCESS"}
    with patch.object(requests.Session, "request", return_value=make_response(json_body=build)) as request:
        assert client.get_build("api", "42") == build

    assert request.call_args.args[1] == "https://ci.example.com/jenkins/job/api/42/api/json"


def test_get_last_build(client):
    with patch.object(requests.Session, "request", return_value=make_response(json_body={"number": 3})) as request:
        assert client.get_last_build("api") == {"number": 3}

    assert request.call_args.args[1] == "https://ci.example.com/jenkins/job/api/lastBuild/api/json"


def test_get_build_log_returns_raw_bytes(client):
    response = make_response(text="Started \u2713\nFinished: SUCCESS\n")
    response.encoding = "ISO-8859-1"
    with patch.object(requests.Session, "request", return_value=response) as request:
        log = client.get_build_log("api", "42")

    assert log == "Started \u2713\nFinished: SUCCESS\n".encode("utf-8")
    assert request.call_args.args[1] == "https://ci.example.com/jenkins/job/api/42/consoleText"


def test_non_success_status_raises_api_error(client):
    response = make_response(status_code=404, text="Not Found", reason="Not Found")
    with patch.object(requests.Session, "request", return_value=response):
        with pytest.raises(JenkinsAPIError) as excinfo:
            client.get_job("missing")

    assert excinfo.value.status_code == 404
    assert str(excinfo.value) == "failed to get job: 404 Not Found - Not Found"


def test_transport_error_raises_request_error(client):
    with patch.object(requests.Session, "request", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(JenkinsRequestError, match="failed to list jobs: refused"):
            client.list_jobs()


def test_bad_json_raises_decode_error(client):
    with patch.object(requests.Session, "request", return_value=make_response(text="<html>")):
        with pytest.raises(ResponseDecodeError, match="failed to decode response"):
            client.get_build("api", "1")
