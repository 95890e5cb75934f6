"""
Navae AI Driver Assistant.

Opens the camera, loads the detection model in the background and serves the
live view with hazard alerts to the browser.

Usage:
    navae --config config/config.yaml

Arguments:
    --config: Path to configuration file
    --host: Bind address (overrides web.host)
    --port: Port (overrides web.port)
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, Optional, Tuple

import uvicorn
import yaml

from navae.models.config import FACINGS, Config
from navae.ops.logging import setup_logging
from navae.web.app import create_app


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Read the YAML layers and deep-merge them, later layers winning:
    1. `default.yaml` next to ``config_path`` (checked in)
    2. `config.yaml` in the same directory (local, untracked)
    3. ``config_path`` itself, when it is some other file
    """
    try:
        config_dir = os.path.dirname(config_path)
        base_path = os.path.join(config_dir, "default.yaml")
        merged: Dict[str, Any] = _read_yaml(base_path) if os.path.exists(base_path) else {}

        local_overrides_path = os.path.join(config_dir, "config.yaml")
        if os.path.exists(local_overrides_path):
            merged = _deep_merge(merged, _read_yaml(local_overrides_path))

        # An explicit file other than config.yaml goes on top
        if os.path.exists(config_path) and os.path.abspath(config_path) != os.path.abspath(local_overrides_path):
            merged = _deep_merge(merged, _read_yaml(config_path))

        return merged
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Check required keys and value ranges before anything is started.

    Returns:
        (True, None) or (False, message naming the offending key)
    """
    required_sections = ['camera', 'detection', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Camera
    camera = config.get('camera') or {}
    devices = camera.get('devices')
    if devices is not None:
        if not isinstance(devices, dict) or not devices:
            return False, "camera.devices must map a facing to a device"
        for facing, device in devices.items():
            if facing not in FACINGS:
                return False, f"camera.devices keys must be one of: {', '.join(FACINGS)}"
            if not isinstance(device, (int, str)) or isinstance(device, bool):
                return False, "camera.devices values must be an integer (index) or string (URL/path)"
            if isinstance(device, int) and device < 0:
                return False, "camera.devices integer indexes must be non-negative"

    if camera.get('facing', 'environment') not in FACINGS:
        return False, f"camera.facing must be one of: {', '.join(FACINGS)}"

    resolution = camera.get('resolution')
    if resolution is not None:
        if not isinstance(resolution, list) or len(resolution) != 2:
            return False, "camera.resolution must be a list of [width, height]"
        if not all(isinstance(x, int) and x > 0 for x in resolution):
            return False, "camera.resolution values must be positive integers"

    if 'fps' in camera and (not isinstance(camera['fps'], int) or camera['fps'] <= 0):
        return False, "camera.fps must be a positive integer"

    # Detection
    detection = config.get('detection') or {}
    if not isinstance(detection.get('model', 'yolov8n.pt'), str) or not detection.get('model', 'yolov8n.pt'):
        return False, "detection.model must be a non-empty string"
    for key in ('conf_threshold', 'iou_threshold'):
        if key in detection:
            if not _is_number(detection[key]) or not (0 <= detection[key] <= 1):
                return False, f"detection.{key} must be a number between 0 and 1"
    if 'poll_interval_ms' in detection:
        if not _is_number(detection['poll_interval_ms']) or detection['poll_interval_ms'] <= 0:
            return False, "detection.poll_interval_ms must be a positive number"

    # Alerts (optional)
    alerts = config.get('alerts') or {}
    if 'score_threshold' in alerts:
        if not _is_number(alerts['score_threshold']) or not (0 <= alerts['score_threshold'] <= 1):
            return False, "alerts.score_threshold must be a number between 0 and 1"
    for key in ('cooldown_ms', 'display_ms'):
        if key in alerts and (not _is_number(alerts[key]) or alerts[key] < 0):
            return False, f"alerts.{key} must be a non-negative number"

    # Speech (optional)
    speech = config.get('speech') or {}
    if 'rate' in speech and (not _is_number(speech['rate']) or speech['rate'] <= 0):
        return False, "speech.rate must be a positive number"
    if 'volume' in speech and (not _is_number(speech['volume']) or not (0 <= speech['volume'] <= 1)):
        return False, "speech.volume must be a number between 0 and 1"

    # Web (optional)
    web = config.get('web') or {}
    if 'port' in web and (not isinstance(web['port'], int) or not (0 < web['port'] < 65536)):
        return False, "web.port must be an integer between 1 and 65535"

    # Log settings
    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config['log_level'] not in valid_log_levels:
        return False, f"log_level must be one of: {', '.join(valid_log_levels)}"

    return True, None


def main():
    """Entry point for the ``navae`` command."""
    parser = argparse.ArgumentParser(description='Navae AI Driver Assistant')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--host', type=str, default=None,
                        help='Bind address (overrides web.host)')
    parser.add_argument('--port', type=int, default=None,
                        help='Port (overrides web.port)')
    args = parser.parse_args()

    raw = load_config(args.config)

    is_valid, error_msg = validate_config(raw)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    config = Config.from_dict(raw)
    if args.host:
        config.web.host = args.host
    if args.port:
        config.web.port = args.port

    setup_logging(config.log_path, config.log_level)
    logging.info("Starting Navae AI Driver Assistant")
    logging.info(f"Web interface on http://{config.web.host}:{config.web.port}")

    uvicorn.run(
        create_app(config),
        host=config.web.host,
        port=config.web.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
