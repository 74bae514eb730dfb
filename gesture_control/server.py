#!/usr/bin/env python3
"""
Gesture Control - FastAPI backend
Stores gesture events per authenticated user and serves a demo page to
drive with gestures
"""

import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from .auth import AuthService
from .errors import AuthenticationError
from .store import RECENT_LIMIT, GestureStore

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


# Request/Response models
class Credentials(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class LogGestureRequest(BaseModel):
    gesture: str
    action: str


class GestureEventModel(BaseModel):
    gesture: str
    action: str
    timestamp: int
    user_id: str


DEMO_PAGE = """<!DOCTYPE html>
<html>
<head><title>Gesture Control</title></head>
<body style="font-family: sans-serif; max-width: 48rem; margin: 2rem auto;">
  <h1>Gesture Control</h1>
  <p>Show a full hand to switch modes. Point to move the cursor, flick to click.
     Grab with three fingers to scroll in scroll mode.</p>
  <div style="display: grid; grid-template-columns: repeat(3, 1fr); gap: 1rem;">
    <button onclick="this.textContent += ' !'">Like</button>
    <button onclick="this.textContent += ' !'">Share</button>
    <button onclick="this.textContent += ' !'">Delete</button>
  </div>
  {items}
</body>
</html>
"""


def _current_user(request: Request,
                  credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Optional[str]:
    token = credentials.credentials if credentials else None
    return request.app.state.auth.verify_token(token)


def create_app(store: Optional[GestureStore] = None, auth: Optional[AuthService] = None) -> FastAPI:
    """
    Build the API.

    Args:
        store: Gesture store, a fresh in-memory one if omitted
        auth: Auth service, one with a random secret if omitted

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Gesture Control API",
        description="Logs recognized hand gestures per user",
        version="0.1.0",
    )
    app.state.store = store or GestureStore()
    app.state.auth = auth or AuthService()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        """Health check endpoint"""
        return {"status": "online", "service": "Gesture Control"}

    @app.post("/auth/register", status_code=status.HTTP_201_CREATED)
    async def register(credentials: Credentials):
        user = app.state.auth.register(credentials.username, credentials.password)
        if user is None:
            raise HTTPException(status_code=409, detail="Username already registered")
        logger.info(f"👤 Registered user {credentials.username}")
        return {"username": user["username"]}

    @app.post("/auth/token", response_model=TokenResponse)
    async def login(credentials: Credentials):
        user = app.state.auth.authenticate(credentials.username, credentials.password)
        if user is None:
            raise HTTPException(status_code=401, detail="Invalid username or password")
        return TokenResponse(access_token=app.state.auth.create_access_token(user["username"]))

    @app.post("/gestures", response_model=GestureEventModel, status_code=status.HTTP_201_CREATED)
    async def log_gesture(request: LogGestureRequest, user_id: Optional[str] = Depends(_current_user)):
        """Store a gesture event for the authenticated user"""
        try:
            event = app.state.store.insert(user_id, request.gesture, request.action)
        except AuthenticationError as e:
            raise HTTPException(
                status_code=401,
                detail=str(e),
                headers={"WWW-Authenticate": "Bearer"},
            )
        logger.info(f"✋ {user_id}: {event.gesture} -> {event.action}")
        return GestureEventModel(**event.to_dict())

    @app.get("/gestures/recent", response_model=List[GestureEventModel])
    async def recent_gestures(user_id: Optional[str] = Depends(_current_user)):
        """Latest gestures for the authenticated user, newest first"""
        events = app.state.store.recent(user_id, RECENT_LIMIT)
        return [GestureEventModel(**e.to_dict()) for e in events]

    @app.get("/demo", response_class=HTMLResponse)
    async def demo():
        """Page with buttons and scrollable content to try gestures on"""
        items = "\n".join(
            f'  <div style="padding: 2rem; margin: 1rem 0; background: #f3f4f6;">Scrollable Content #{i}</div>'
            for i in range(1, 31)
        )
        return DEMO_PAGE.replace("{items}", items)

    return app


load_dotenv()
app = create_app(auth=AuthService(os.getenv("GESTURE_SECRET_KEY")))


def main():
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Gesture Control backend")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    logger.info("🚀 Starting Gesture Control backend...")
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
