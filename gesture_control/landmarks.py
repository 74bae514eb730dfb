"""
Hand shape recognition from the 21 MediaPipe hand landmarks.
"""
from typing import Tuple

from .types import GestureKind, Landmarks


NUM_LANDMARKS = 21

# Landmark indices used for shape recognition
THUMB_TIP = 4
INDEX_BASE = 5
INDEX_TIP = 8
MIDDLE_TIP = 12
RING_TIP = 16
PINKY_TIP = 20

FINGERTIPS = (THUMB_TIP, INDEX_TIP, MIDDLE_TIP, RING_TIP, PINKY_TIP)


def _check(landmarks: Landmarks) -> None:
    if len(landmarks) < NUM_LANDMARKS:
        raise ValueError(f"Expected {NUM_LANDMARKS} landmarks, got {len(landmarks)}")


def _above_base(landmarks: Landmarks, idx: int) -> bool:
    # Image y grows downwards, so "above" is numerically smaller
    return landmarks[idx][1] < landmarks[INDEX_BASE][1]


def _below_base(landmarks: Landmarks, idx: int) -> bool:
    return landmarks[idx][1] > landmarks[INDEX_BASE][1]


def is_full_hand(landmarks: Landmarks) -> bool:
    """
    Check if all five fingertips are raised above the index finger base.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        True for an open, raised hand
    """
    return all(_above_base(landmarks, tip) for tip in FINGERTIPS)


def is_grab(landmarks: Landmarks) -> bool:
    """
    Check for the three-finger grab: thumb, index and middle raised,
    ring and pinky lowered.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        True if the hand is in the grab shape
    """
    return (_above_base(landmarks, THUMB_TIP) and
            _above_base(landmarks, INDEX_TIP) and
            _above_base(landmarks, MIDDLE_TIP) and
            _below_base(landmarks, RING_TIP) and
            _below_base(landmarks, PINKY_TIP))


def is_point(landmarks: Landmarks) -> bool:
    """
    Check if the index finger is raised while the middle finger is lowered.
    The other fingers are not considered.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        True if the hand is pointing
    """
    return _above_base(landmarks, INDEX_TIP) and _below_base(landmarks, MIDDLE_TIP)


def classify(landmarks: Landmarks) -> GestureKind:
    """
    Classify a hand shape. The first matching shape wins, in the order
    full hand, grab, point.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        The recognized GestureKind, GestureKind.NONE if nothing matched
    """
    _check(landmarks)

    if is_full_hand(landmarks):
        return GestureKind.FULL_HAND
    if is_grab(landmarks):
        return GestureKind.GRAB
    if is_point(landmarks):
        return GestureKind.POINT
    return GestureKind.NONE


def pointer_landmark(landmarks: Landmarks) -> Tuple[float, float]:
    """Return the index fingertip, which drives the on-screen pointer."""
    return landmarks[INDEX_TIP]
