import json
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from src.modules.ingestion.domain.errors import NoStreamsFound, ProbeFailure
from src.modules.ingestion.domain.geometry import StreamGeometry
from src.modules.ingestion.infrastructure.adapters.ffprobe_geometry_prober import FFprobeGeometryProber

RUN = "src.modules.ingestion.infrastructure.adapters.ffprobe_geometry_prober.subprocess.run"


def completed(payload) -> MagicMock:
    stdout = payload if isinstance(payload, str) else json.dumps(payload)
    return MagicMock(returncode=0, stdout=stdout, stderr="")


def test_command_contract():
    prober = FFprobeGeometryProber(binary="/usr/bin/ffprobe")
    assert prober.build_command("/tmp/in.mp4") == [
        "/usr/bin/ffprobe", "-v", "error", "-print_format", "json", "-show_streams", "/tmp/in.mp4",
    ]


def test_reads_first_stream_geometry():
    report = {"streams": [
        {"codec_type": "video", "width": 1280, "height": 720},
        {"codec_type": "audio"},
    ]}
    with patch(RUN, return_value=completed(report)) as run:
        geometry = FFprobeGeometryProber(timeout=5).probe("/tmp/in.mp4")

    assert geometry == StreamGeometry(width=1280, height=720)
    run.assert_called_once()
    _, kwargs = run.call_args
    assert kwargs["check"] is True
    assert kwargs["timeout"] == 5


def test_no_timeout_by_default():
    with patch(RUN, return_value=completed({"streams": [{"width": 2, "height": 2}]})) as run:
        FFprobeGeometryProber().probe("/tmp/in.mp4")
    assert run.call_args.kwargs["timeout"] is None


def test_non_zero_exit_is_probe_failure():
    error = subprocess.CalledProcessError(1, ["ffprobe"], output="", stderr="moov atom not found")
    with patch(RUN, side_effect=error):
        with pytest.raises(ProbeFailure) as excinfo:
            FFprobeGeometryProber().probe("/tmp/in.mp4")
    assert "moov atom not found" in excinfo.value.message
    assert excinfo.value.__cause__ is error
    assert excinfo.value.status_code == 500


def test_missing_binary_is_probe_failure():
    with patch(RUN, side_effect=FileNotFoundError("ffprobe")):
        with pytest.raises(ProbeFailure):
            FFprobeGeometryProber().probe("/tmp/in.mp4")


def test_timeout_is_probe_failure():
    with patch(RUN, side_effect=subprocess.TimeoutExpired(["ffprobe"], 1)):
        with pytest.raises(ProbeFailure):
            FFprobeGeometryProber(timeout=1).probe("/tmp/in.mp4")


@pytest.mark.parametrize("stdout", ["", "not json", "[1, 2]", '{"streams": {"width": 1}}'])
def test_unparseable_report_is_probe_failure(stdout):
    with patch(RUN, return_value=completed(stdout)):
        with pytest.raises(ProbeFailure) as excinfo:
            FFprobeGeometryProber().probe("/tmp/in.mp4")
    assert not isinstance(excinfo.value, NoStreamsFound)


@pytest.mark.parametrize("report", [{"streams": []}, {}])
def test_empty_stream_list(report):
    with patch(RUN, return_value=completed(report)):
        with pytest.raises(NoStreamsFound):
            FFprobeGeometryProber().probe("/tmp/in.mp4")


def test_first_stream_without_geometry_is_not_guessed():
    report = {"streams": [{"codec_type": "audio"}, {"codec_type": "video", "width": 1920, "height": 1080}]}
    with patch(RUN, return_value=completed(report)):
        with pytest.raises(ProbeFailure):
            FFprobeGeometryProber().probe("/tmp/in.mp4")


@pytest.mark.parametrize("width,height", [(True, 1080), (1920, False), ("1920", 1080), (0, 1080), (1920, -1)])
def test_non_integer_or_non_positive_dimensions_are_rejected(width, height):
    report = {"streams": [{"codec_type": "video", "width": width, "height": height}]}
    with pytest.raises(ProbeFailure):
        FFprobeGeometryProber.parse_report(json.dumps(report))
