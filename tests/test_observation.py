"""
Tests for observation layer.
"""

import asyncio
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from conftest import MockSource
from navae.errors import MediaUnavailable
from navae.models.config import CameraConfig
from navae.observation import create_source_for_facing
from navae.observation.base import ObservationConfig
from navae.observation.feed import CameraFeed
from navae.observation.opencv_source import OpenCVSource, OpenCVSourceConfig


class TestObservationConfig:
    def test_default_config(self):
        config = ObservationConfig()
        assert config.facing == "environment"
        assert config.mirrored is False
        assert config.resolution is None
        assert config.fps is None


class TestOpenCVSourceConfig:
    def test_back_camera(self):
        camera_cfg = CameraConfig(devices={"environment": 0, "user": 2}, resolution=[640, 480], fps=15)
        config = OpenCVSourceConfig.for_facing(camera_cfg, "environment")

        assert config.device == 0
        assert config.mirrored is False
        assert config.resolution == (640, 480)
        assert config.fps == 15

    def test_front_camera_is_mirrored(self):
        camera_cfg = CameraConfig(devices={"environment": 0, "user": 2})
        config = OpenCVSourceConfig.for_facing(camera_cfg, "user")

        assert config.device == 2
        assert config.facing == "user"
        assert config.mirrored is True

    def test_create_source_for_facing(self):
        source = create_source_for_facing(CameraConfig(), "user")
        assert isinstance(source, OpenCVSource)
        assert source.facing == "user"
        assert source.is_open is False


def make_capture(frame):
    cap = MagicMock()
    cap.isOpened.return_value = True
    cap.read.return_value = (True, frame)
    cap.get.return_value = 0
    return cap


class TestOpenCVSource:
    def test_read_flips_front_camera(self):
        frame = np.zeros((4, 6, 3), dtype=np.uint8)
        frame[:, 0] = 255  # left column white
        config = OpenCVSourceConfig(facing="user", mirrored=True, device=1)

        with patch("navae.observation.opencv_source.cv2.VideoCapture", return_value=make_capture(frame)):
            with OpenCVSource(config) as source:
                frame_data = source.read()

        assert frame_data.size == (6, 4)
        assert frame_data.facing == "user"
        assert frame_data.frame[:, 5].all()
        assert not frame_data.frame[:, 0].any()

    def test_read_back_camera_untouched(self):
        frame = np.zeros((4, 6, 3), dtype=np.uint8)
        frame[:, 0] = 255
        config = OpenCVSourceConfig(facing="environment", device=0)

        with patch("navae.observation.opencv_source.cv2.VideoCapture", return_value=make_capture(frame)):
            with OpenCVSource(config) as source:
                frame_data = source.read()
                assert source.frame_index == 1

        assert frame_data.frame[:, 0].all()

    def test_read_returns_none_without_frame(self):
        cap = make_capture(None)
        cap.read.return_value = (False, None)

        with patch("navae.observation.opencv_source.cv2.VideoCapture", return_value=cap):
            with OpenCVSource(OpenCVSourceConfig(device=0)) as source:
                assert source.read() is None

    def test_open_failure_raises(self):
        cap = MagicMock()
        cap.isOpened.return_value = False

        with patch("navae.observation.opencv_source.cv2.VideoCapture", return_value=cap):
            source = OpenCVSource(OpenCVSourceConfig(device=5, max_retries=1))
            with pytest.raises(RuntimeError, match="Failed to open device 5"):
                source.open()
        assert source.is_open is False

    def test_close_is_idempotent(self):
        source = OpenCVSource(OpenCVSourceConfig(device=0))
        source.close()
        source.close()
        assert source.is_open is False


class TestCameraFeed:
    def test_not_ready_until_first_frame(self, mock_source_factory):
        feed = CameraFeed(mock_source_factory)

        assert feed.is_ready is False
        with pytest.raises(MediaUnavailable):
            feed.require_latest()

        frame_data = asyncio.run(feed.step())

        assert feed.is_ready is True
        assert feed.require_latest() is frame_data

    def test_open_failure_leaves_feed_not_ready(self):
        feed = CameraFeed(lambda facing: MockSource(ObservationConfig(facing=facing), fail_open=True))

        assert asyncio.run(feed.step()) is None
        assert feed.is_ready is False

    def test_facing_change_releases_old_source(self, mock_source_factory):
        feed = CameraFeed(mock_source_factory)

        async def run():
            await feed.step()
            feed.set_facing("user")
            return await feed.step()

        frame_data = asyncio.run(run())

        assert feed.facing == "user"
        assert frame_data.facing == "user"
        assert mock_source_factory.built[0].closed is True

    def test_set_same_facing_keeps_source(self, mock_source_factory):
        feed = CameraFeed(mock_source_factory)

        async def run():
            await feed.step()
            feed.set_facing("environment")
            await feed.step()

        asyncio.run(run())
        assert len(mock_source_factory.built) == 1

    def test_background_task_and_close(self, mock_source_factory):
        feed = CameraFeed(mock_source_factory, frame_interval=0.01)

        async def run():
            feed.start()
            await asyncio.sleep(0.1)
            ready = feed.is_ready
            await feed.close()
            return ready

        assert asyncio.run(run()) is True
        assert feed.running is False
        assert feed.is_ready is False
        assert mock_source_factory.built[0].closed is True
