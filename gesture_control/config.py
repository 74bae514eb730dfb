"""
Configuration management for the gesture control system.
"""
import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int
    model_complexity: int
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class GesturesConfig:
    """Gesture interaction thresholds."""
    mode_switch_cooldown_ms: int
    click_cooldown_ms: int
    click_threshold_px: float


@dataclass
class ViewportConfig:
    """Size of the page the pointer is mapped onto."""
    width: int
    height: int


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    show_pointer: bool
    window_name: str


@dataclass
class BackendConfig:
    """Gesture log backend settings."""
    base_url: str
    token: Optional[str]
    timeout_s: float
    username: Optional[str] = None
    password: Optional[str] = None


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    gestures: GesturesConfig
    viewport: ViewportConfig
    display: DisplayConfig
    backend: BackendConfig


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Backend settings can be overridden with the GESTURE_API_URL,
    GESTURE_API_TOKEN, GESTURE_API_USER and GESTURE_API_PASSWORD
    environment variables (a .env file is honoured).

    Args:
        path: Path to config file. If None, uses config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        path = Path(__file__).parent / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f)

    load_dotenv()
    return _dict_to_config(data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    camera_data = data['camera']
    camera = CameraConfig(
        index=camera_data['index'],
        width=camera_data['width'],
        height=camera_data['height'],
        fps=camera_data['fps']
    )

    mp_data = data['mediapipe']
    mediapipe = MediaPipeConfig(
        max_num_hands=mp_data['max_num_hands'],
        model_complexity=mp_data.get('model_complexity', 1),
        min_detection_confidence=mp_data['min_detection_confidence'],
        min_tracking_confidence=mp_data['min_tracking_confidence']
    )

    gestures_data = data['gestures']
    gestures = GesturesConfig(
        mode_switch_cooldown_ms=gestures_data['mode_switch_cooldown_ms'],
        click_cooldown_ms=gestures_data['click_cooldown_ms'],
        click_threshold_px=float(gestures_data['click_threshold_px'])
    )

    viewport_data = data['viewport']
    viewport = ViewportConfig(
        width=viewport_data['width'],
        height=viewport_data['height']
    )

    display_data = data['display']
    display = DisplayConfig(
        show_landmarks=display_data['show_landmarks'],
        show_pointer=display_data['show_pointer'],
        window_name=display_data['window_name']
    )

    backend_data = data['backend']
    backend = BackendConfig(
        base_url=os.getenv("GESTURE_API_URL", backend_data['base_url']),
        token=os.getenv("GESTURE_API_TOKEN", backend_data.get('token')),
        timeout_s=float(backend_data['timeout_s']),
        username=os.getenv("GESTURE_API_USER", backend_data.get('username')),
        password=os.getenv("GESTURE_API_PASSWORD", backend_data.get('password'))
    )

    return Cfg(
        camera=camera,
        mediapipe=mediapipe,
        gestures=gestures,
        viewport=viewport,
        display=display,
        backend=backend
    )
