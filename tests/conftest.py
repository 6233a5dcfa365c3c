"""Shared test fixtures for video-label-batch."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from google.cloud import videointelligence

import video_label_batch.config as cfg_mod
from video_label_batch.client import AnnotationClient

_ENV_VARS = (
    "VIDEO_LABELS_OUTPUT",
    "VIDEO_LABELS_TIMEOUT",
    "VIDEO_LABELS_RETRY_MAX_ATTEMPTS",
    "VIDEO_LABELS_RETRY_BASE_DELAY",
    "VIDEO_LABELS_RETRY_MAX_DELAY",
    "VIDEO_LABELS_CONTINUE_ON_ERROR",
    "VIDEO_LABELS_AGGREGATION",
    "VIDEO_LABELS_TIE_BREAK",
    "VIDEO_LABELS_DIGITS",
    "VIDEO_LABELS_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Start every test from defaults, whatever the developer's shell exports."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _clean_config():
    """Reset the config singleton between tests."""
    cfg_mod._config = None
    yield
    cfg_mod._config = None


@pytest.fixture(autouse=True)
def _isolate_dotenv(tmp_path, monkeypatch):
    """Prevent tests from loading the user's real ~/.config/video-label-batch/.env."""
    monkeypatch.setattr(
        "video_label_batch.dotenv.DEFAULT_ENV_PATH",
        tmp_path / "nonexistent.env",
    )


@pytest.fixture(autouse=True)
def _reset_annotation_client():
    """Never share a real Video Intelligence client between tests."""
    AnnotationClient._client = None
    yield
    AnnotationClient._client = None


def _label_annotation(label: str, *confidences: float) -> videointelligence.LabelAnnotation:
    return videointelligence.LabelAnnotation(
        entity=videointelligence.Entity(description=label),
        segments=[videointelligence.LabelSegment(confidence=c) for c in confidences],
    )


@pytest.fixture()
def make_response():
    """Factory for AnnotateVideoResponse messages.

    Each positional argument is one annotation result given as a list of
    ``(label, confidence, ...)`` tuples for its shot label annotations.
    Keyword ``segment_labels`` adds segment-level annotations to the first result.
    """
    def _factory(*results, segment_labels=(), frame_labels=()):
        groups = []
        for i, shots in enumerate(results or ([],)):
            groups.append(videointelligence.VideoAnnotationResults(
                shot_label_annotations=[_label_annotation(lbl, *conf) for lbl, *conf in shots],
                segment_label_annotations=(
                    [_label_annotation(lbl, *conf) for lbl, *conf in segment_labels] if i == 0 else []
                ),
                frame_label_annotations=(
                    [videointelligence.LabelAnnotation(
                        entity=videointelligence.Entity(description=lbl),
                        frames=[videointelligence.LabelFrame(confidence=c) for c in conf],
                    ) for lbl, *conf in frame_labels] if i == 0 else []
                ),
            ))
        return videointelligence.AnnotateVideoResponse(annotation_results=groups)

    return _factory


@pytest.fixture()
def mock_vi_client():
    """Patch AnnotationClient.get() with a mock async client.

    ``annotate_video`` resolves to an operation whose ``result`` is an AsyncMock;
    set ``operation.result.return_value`` or ``side_effect`` per test.
    """
    operation = MagicMock()
    operation.result = AsyncMock(return_value=videointelligence.AnnotateVideoResponse())
    client = MagicMock()
    client.annotate_video = AsyncMock(return_value=operation)
    client.transport.close = AsyncMock()
    with patch("video_label_batch.client.AnnotationClient.get", return_value=client) as mock_get:
        yield {"get": mock_get, "client": client, "operation": operation}


@pytest.fixture()
def mock_annotate_labels():
    """Patch AnnotationClient.annotate_labels for runner and CLI tests."""
    with patch(
        "video_label_batch.client.AnnotationClient.annotate_labels",
        new_callable=AsyncMock,
    ) as mock:
        mock.return_value = {}
        yield mock


@pytest.fixture()
def video_dir(tmp_path):
    """Create a directory of fake video files; returns a factory."""
    def _factory(*names: str):
        d = tmp_path / "videos"
        d.mkdir(exist_ok=True)
        for name in names:
            (d / name).write_bytes(b"\x00\x00\x00\x18ftypmp42" + name.encode())
        return d

    return _factory
