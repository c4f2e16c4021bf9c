"""
Prediction Client for Page Builder
==================================

HTTP client for the image-classification service behind the public chat
widget. The widget sends an uploaded image; the reply is a one-line answer.
"""

import os
import httpx
from typing import Any, Dict, Optional
from pydantic import BaseModel
import logging

logger = logging.getLogger(__name__)

PREDICTION_API_URL = os.getenv(
    "PREDICTION_API_URL",
    "http://localhost:5000"
)

DEFAULT_ENDPOINT = "/api/predict-mobilenet"
POSE_ENDPOINT = "/api/predict-movenet"
INCEPTION_ENDPOINT = "/api/predict-inception"

UNKNOWN_REPLY = "I'm not sure what that is."
ERROR_REPLY = "Sorry, I encountered an error analyzing that image."


class PredictionRequest(BaseModel):
    """Model metadata and image for one prediction."""
    user_id: str
    project_id: str
    image: str                          # base64, no data-URL prefix
    project_type: str = "IMAGE"         # IMAGE | POSE
    base_model_name: Optional[str] = None


class PredictionResponse(BaseModel):
    """Result of a prediction call, already phrased as a chat reply."""
    success: bool
    reply_text: str
    label: Optional[str] = None
    raw: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


def select_endpoint(project_type: str, base_model_name: Optional[str] = None) -> str:
    """Pick the prediction endpoint for a project's model family."""
    if project_type == "POSE":
        return POSE_ENDPOINT
    if project_type == "IMAGE" and base_model_name == "InceptionV3":
        return INCEPTION_ENDPOINT
    return DEFAULT_ENDPOINT


def reply_from_result(result: Dict[str, Any]) -> PredictionResponse:
    """Turn a prediction payload into the widget's reply."""
    predictions = result.get("predictions") or []
    if predictions:
        top = predictions[0]
        label = top.get("className") or top.get("label") or top.get("class")
        if label:
            return PredictionResponse(success=True, reply_text=f"It's a {label}", label=str(label), raw=result)
    if result.get("keypoints"):
        return PredictionResponse(success=True, reply_text="It's a Pose Detected", raw=result)
    return PredictionResponse(success=True, reply_text=UNKNOWN_REPLY, raw=result)


class PredictionClient:
    """
    HTTP client for the prediction service.

    Usage:
        client = PredictionClient()
        response = await client.predict(PredictionRequest(
            user_id="u-1", project_id="p-1", image=base64_image
        ))
        print(response.reply_text)
    """

    def __init__(self, base_url: str = None, timeout: float = 30.0):
        self.base_url = base_url or PREDICTION_API_URL
        self.timeout = timeout
        logger.info(f"[PredictionClient] Initialized with base URL: {self.base_url}")

    async def predict(self, request: PredictionRequest) -> PredictionResponse:
        """
        Classify an image for a deployed model.

        Args:
            request: Model metadata and base64 image

        Returns:
            PredictionResponse; on failure success=False with the error reply
        """
        url = f"{self.base_url}{select_endpoint(request.project_type, request.base_model_name)}"
        payload = {
            "userId": request.user_id,
            "projectId": request.project_id,
            "image": request.image,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, json=payload)

                if response.status_code != 200:
                    error_msg = f"Prediction service error: HTTP {response.status_code}"
                    logger.error(f"[PredictionClient] {error_msg}")
                    return PredictionResponse(success=False, reply_text=ERROR_REPLY, error=error_msg)

                return reply_from_result(response.json())

        except httpx.TimeoutException:
            logger.error("[PredictionClient] Timeout calling prediction service")
            return PredictionResponse(success=False, reply_text=ERROR_REPLY, error="Prediction service timeout")
        except httpx.RequestError as e:
            logger.error(f"[PredictionClient] Network error: {e}")
            return PredictionResponse(success=False, reply_text=ERROR_REPLY, error=f"Network error: {str(e)}")
        except Exception as e:
            logger.error(f"[PredictionClient] Unexpected error: {e}")
            return PredictionResponse(success=False, reply_text=ERROR_REPLY, error=f"Unexpected error: {str(e)}")
