"""
Hand landmark tracking using MediaPipe Hands.
"""
import cv2
import mediapipe as mp
import numpy as np
from typing import Optional

from .landmarks import FINGERTIPS, INDEX_BASE
from .types import Landmarks


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""

    def __init__(self, max_num_hands: int = 1, model_complexity: int = 1,
                 min_detection_conf: float = 0.6, min_tracking_conf: float = 0.6):
        """
        Initialize the hands tracker.

        Args:
            max_num_hands: Maximum number of hands to detect
            model_complexity: 0 for the lite model, 1 for the full model
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
        """
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )

    def process(self, frame_bgr: np.ndarray) -> Optional[Landmarks]:
        """
        Process a frame and return hand landmarks.

        Args:
            frame_bgr: Input frame in BGR format

        Returns:
            List of 21 (x, y) coordinates in frame pixels, or None if no hand detected
        """
        height, width = frame_bgr.shape[:2]
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)

        results = self.hands.process(frame_rgb)

        if not results.multi_hand_landmarks:
            return None

        # Only the first hand drives the pointer
        hand_landmarks = results.multi_hand_landmarks[0]
        return [(lm.x * width, lm.y * height) for lm in hand_landmarks.landmark]

    def draw_landmarks(self, frame: np.ndarray, landmarks: Landmarks) -> np.ndarray:
        """
        Draw hand landmarks on the frame.

        Args:
            frame: Input frame
            landmarks: List of (x, y) coordinates in frame pixels

        Returns:
            Frame with landmarks drawn
        """
        for i, (x, y) in enumerate(landmarks):
            px, py = int(x), int(y)
            color = (0, 255, 255) if i in FINGERTIPS or i == INDEX_BASE else (0, 255, 0)
            cv2.circle(frame, (px, py), 3, color, -1)
            cv2.putText(frame, str(i), (px + 5, py - 5), cv2.FONT_HERSHEY_SIMPLEX, 0.3, (255, 255, 255), 1)

        return frame

    def close(self) -> None:
        """Release the MediaPipe graph."""
        self.hands.close()

